from datetime import datetime

from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Float
from sqlalchemy.orm import relationship

from app.db.session import Base

class Workout(Base):
    __tablename__ = "workouts"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    activities = relationship(
        "WorkoutActivity",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutActivity.activity_type",
    )

class WorkoutActivity(Base):
    __tablename__ = "workout_activities"

    id = Column(String, primary_key=True, index=True)
    workout_id = Column(String, ForeignKey("workouts.id", ondelete="CASCADE"), index=True, nullable=False)
    activity_type = Column(String, nullable=False)  # running, cycling, pullups, ...
    quantity = Column(Float, nullable=False, default=0)
    points_earned = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    workout = relationship("Workout", back_populates="activities")
