from typing import Optional

from app.core.schemas import APIModel

class UserSummary(APIModel):
    """Public identity of a user as shown in lists and search results"""
    id: str
    first_name: str
    last_name: str
    nickname: Optional[str] = None
    display_name: str
    avatar_url: Optional[str] = None

class UserSearchResult(UserSummary):
    email: Optional[str] = None

class UserPreferences(APIModel):
    """Privacy switches; reaction settings apply to the user's own workouts"""
    public_profile: bool = True
    reactions_friends_can_see: bool = True
    reactions_show_names: bool = True

class UserPreferencesUpdate(APIModel):
    public_profile: Optional[bool] = None
    reactions_friends_can_see: Optional[bool] = None
    reactions_show_names: Optional[bool] = None
