from datetime import datetime

from sqlalchemy import Boolean, Column, String, DateTime

from app.db.session import Base

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, default="")
    nickname = Column(String, nullable=True)
    display_preference = Column(String, default="firstName")  # firstName, nickname, fullName
    avatar_url = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    # Privacy preferences
    public_profile = Column(Boolean, default=True, nullable=False)  # findable through search
    reactions_friends_can_see = Column(Boolean, default=True, nullable=False)
    reactions_show_names = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
