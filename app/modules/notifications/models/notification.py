from datetime import datetime

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Text, JSON

from app.db.session import Base

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    actor_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)  # The user who triggered the notification
    type = Column(String)  # friend-request-received, friend-request-accepted, friend-request-declined, workout-reaction
    title = Column(String)
    message = Column(Text)
    payload = Column(JSON, default=dict)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
