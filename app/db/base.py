# Import all models here so Base.metadata knows every table
from app.db.session import Base

from app.modules.user_management.models.user import User
from app.modules.workouts.models.workout import Workout, WorkoutActivity
from app.modules.workouts.reactions.models.reaction import WorkoutReaction
from app.modules.friendships.models.friendship import Friendship, FriendRequest
from app.modules.notifications.models.notification import Notification
