from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint

from app.db.session import Base

# One emoji per reacting user and workout; reacting again replaces it
class WorkoutReaction(Base):
    __tablename__ = "workout_reactions"

    id = Column(String, primary_key=True, index=True)
    workout_id = Column(String, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    emoji = Column(String(16), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("workout_id", "user_id", name="unique_workout_reaction"),
    )
