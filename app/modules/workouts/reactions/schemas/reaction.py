from typing import List, Optional

from pydantic import field_validator

from app.core.schemas import APIModel

ALLOWED_EMOJIS = ("👍", "❤️", "🔥", "💪", "🎉", "😊")

class ReactionCreate(APIModel):
    workout_id: str
    emoji: str

    @field_validator("emoji")
    @classmethod
    def validate_emoji(cls, v: str) -> str:
        v = v.strip()
        if v not in ALLOWED_EMOJIS:
            raise ValueError(f"Emoji must be one of: {', '.join(ALLOWED_EMOJIS)}")
        return v

class ReactionUser(APIModel):
    id: str
    name: str
    avatar: Optional[str] = None

class ReactionSummary(APIModel):
    """Reactions of one emoji on a workout, as the viewer may see them"""
    emoji: str
    count: int
    users: List[ReactionUser] = []
    current_user_reaction: Optional[str] = None

class ReactionList(APIModel):
    reactions: List[ReactionSummary] = []
