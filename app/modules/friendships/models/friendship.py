from datetime import datetime
import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Index, UniqueConstraint, CheckConstraint, text

from app.db.session import Base

# Confirmed, undirected friendship stored once per unordered pair
class Friendship(Base):
    __tablename__ = "friendships"

    id = Column(String, primary_key=True, index=True)
    user_one_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_two_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_one_id", "user_two_id", name="unique_friendship"),
        CheckConstraint("user_one_id < user_two_id", name="canonical_friendship_order"),
    )

    def other_user_id(self, user_id: str) -> str:
        return self.user_two_id if self.user_one_id == user_id else self.user_one_id

    def involves(self, user_id: str) -> bool:
        return user_id in (self.user_one_id, self.user_two_id)


class FriendRequestStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"


# Friend request model
class FriendRequest(Base):
    __tablename__ = "friend_requests"

    id = Column(String, primary_key=True, index=True)
    requester_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Canonical copy of the pair, only used to enforce one pending request per pair
    pair_low_id = Column(String, nullable=False)
    pair_high_id = Column(String, nullable=False)
    status = Column(
        Enum(FriendRequestStatus, native_enum=False, length=16),
        default=FriendRequestStatus.pending,
        nullable=False,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    responded_at = Column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("requester_id != target_id", name="no_self_friend_request"),
        Index(
            "unique_pending_friend_request",
            "pair_low_id",
            "pair_high_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )
