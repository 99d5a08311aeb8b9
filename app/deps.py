from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core import security
from app.core.exceptions import Unauthorized
from app.db.session import get_db
from app.modules.user_management.models.user import User
from app.modules.user_management.services.user import get_user

# Tokens are issued by the external auth service; this API has no login route
bearer_scheme = HTTPBearer(auto_error=False)

def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Dependency for getting current authenticated user
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("No token provided")

    user_id = security.verify_access_token(credentials.credentials)
    if user_id is None:
        raise Unauthorized("Token is invalid")

    user = get_user(db, user_id=user_id)
    if not user or not user.is_active:
        raise Unauthorized("Token is invalid")

    return user
