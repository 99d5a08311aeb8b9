from typing import Dict, Iterable, Optional
from sqlalchemy.orm import Session

from app.modules.user_management.models.user import User
from app.modules.user_management.schemas.user import UserPreferencesUpdate, UserSummary

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()

def get_users_by_ids(db: Session, user_ids: Iterable[str]) -> Dict[str, User]:
    """Get users keyed by ID in a single query"""
    ids = list(set(user_ids))
    if not ids:
        return {}
    return {user.id: user for user in db.query(User).filter(User.id.in_(ids)).all()}

def get_display_name(user: User, fallback: str = "") -> str:
    """Resolve the name a user wants to be shown under"""
    if user.display_preference == "nickname" and user.nickname:
        return user.nickname
    if user.display_preference == "fullName":
        full_name = " ".join(part for part in (user.first_name, user.last_name) if part).strip()
        return full_name or fallback
    return user.first_name or user.nickname or fallback

def to_user_summary(user: User) -> UserSummary:
    return UserSummary(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name or "",
        nickname=user.nickname,
        display_name=get_display_name(user),
        avatar_url=user.avatar_url,
    )

def update_preferences(db: Session, user: User, preferences_in: UserPreferencesUpdate) -> User:
    """Apply only the switches the client sent"""
    for field, value in preferences_in.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
