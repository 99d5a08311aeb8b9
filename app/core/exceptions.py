"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; app.main renders them as
``{"error": detail}`` so no storage-level detail reaches the client.
"""
from typing import Optional

from fastapi import status


class DomainError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not enough permissions"


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class InvalidTarget(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Cannot send a friend request to yourself"


class InvalidState(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Friend request was already handled"


class AlreadyFriends(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already friends with this user"


class RequestAlreadyPending(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A friend request between you is already pending"
