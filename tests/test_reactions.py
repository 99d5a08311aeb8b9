"""
Tests for workout reactions
"""

import pytest

from app.core.exceptions import InvalidTarget, NotFound
from app.modules.friendships.services.friendship import add_edge
from app.modules.notifications.services.notification import get_user_notifications
from app.modules.workouts.reactions.models.reaction import WorkoutReaction
from app.modules.workouts.reactions.services.reaction import (
    list_reactions,
    react_to_workout,
    remove_reaction,
)


def befriend(db, user_a, user_b):
    edge = add_edge(db, user_a.id, user_b.id)
    db.commit()
    return edge


def set_preferences(db, user, **preferences):
    for name, value in preferences.items():
        setattr(user, name, value)
    db.commit()


class TestReactToWorkout:
    def test_friend_reacts(self, db, make_user, make_workout):
        alice = make_user("Alice")
        bob = make_user("Bob", avatar_url="https://cdn.example.com/b.png")
        befriend(db, alice, bob)
        run = make_workout(alice, "2024-05-01T08:00:00")

        summaries = react_to_workout(db, bob.id, run.id, "🔥")

        assert len(summaries) == 1
        assert summaries[0].emoji == "🔥"
        assert summaries[0].count == 1
        assert summaries[0].current_user_reaction == "🔥"
        assert [(u.id, u.name, u.avatar) for u in summaries[0].users] == [
            (bob.id, "Bob", "https://cdn.example.com/b.png")
        ]

    def test_second_reaction_replaces_first(self, db, make_user, make_workout):
        alice = make_user("Alice")
        bob = make_user("Bob")
        befriend(db, alice, bob)
        run = make_workout(alice, "2024-05-01T08:00:00")

        react_to_workout(db, bob.id, run.id, "🔥")
        summaries = react_to_workout(db, bob.id, run.id, "💪")

        assert [(s.emoji, s.count) for s in summaries] == [("💪", 1)]
        assert db.query(WorkoutReaction).count() == 1

    def test_reactions_group_by_emoji(self, db, make_user, make_workout):
        alice = make_user("Alice")
        bob = make_user("Bob")
        carol = make_user("Carol")
        dave = make_user("Dave")
        for friend in (bob, carol, dave):
            befriend(db, alice, friend)
        run = make_workout(alice, "2024-05-01T08:00:00")

        react_to_workout(db, bob.id, run.id, "🔥")
        react_to_workout(db, carol.id, run.id, "🔥")
        react_to_workout(db, dave.id, run.id, "🎉")

        summaries = {s.emoji: s for s in list_reactions(db, run.id, bob.id)}
        assert summaries["🔥"].count == 2
        assert summaries["🔥"].current_user_reaction == "🔥"
        assert summaries["🎉"].count == 1
        assert summaries["🎉"].current_user_reaction is None

    def test_own_workout_is_rejected(self, db, make_user, make_workout):
        alice = make_user("Alice")
        run = make_workout(alice, "2024-05-01T08:00:00")

        with pytest.raises(InvalidTarget):
            react_to_workout(db, alice.id, run.id, "🔥")

    def test_stranger_cannot_see_workout(self, db, make_user, make_workout):
        alice = make_user("Alice")
        mallory = make_user("Mallory")
        run = make_workout(alice, "2024-05-01T08:00:00")

        with pytest.raises(NotFound):
            react_to_workout(db, mallory.id, run.id, "🔥")
        with pytest.raises(NotFound):
            list_reactions(db, run.id, mallory.id)
        assert db.query(WorkoutReaction).count() == 0

    def test_missing_workout(self, db, make_user):
        alice = make_user("Alice")

        with pytest.raises(NotFound):
            react_to_workout(db, alice.id, "no-such-workout", "🔥")

    def test_owner_is_notified(self, db, make_user, make_workout):
        alice = make_user("Alice")
        bob = make_user("Bob")
        befriend(db, alice, bob)
        run = make_workout(alice, "2024-05-01T08:00:00")

        react_to_workout(db, bob.id, run.id, "❤️")

        notifications = get_user_notifications(db, alice.id)
        assert [n.type for n in notifications] == ["workout-reaction"]
        assert notifications[0].actor_id == bob.id
        assert notifications[0].payload["workoutId"] == run.id
        assert notifications[0].payload["emoji"] == "❤️"


class TestRemoveReaction:
    def test_remove(self, db, make_user, make_workout):
        alice = make_user("Alice")
        bob = make_user("Bob")
        befriend(db, alice, bob)
        run = make_workout(alice, "2024-05-01T08:00:00")
        react_to_workout(db, bob.id, run.id, "👍")

        assert remove_reaction(db, bob.id, run.id) == []
        assert db.query(WorkoutReaction).count() == 0

    def test_removing_missing_reaction_is_a_no_op(self, db, make_user, make_workout):
        alice = make_user("Alice")
        bob = make_user("Bob")
        befriend(db, alice, bob)
        run = make_workout(alice, "2024-05-01T08:00:00")

        assert remove_reaction(db, bob.id, run.id) == []


class TestReactionPrivacy:
    def test_hidden_from_friends_but_not_owner(self, db, make_user, make_workout):
        alice = make_user("Alice")
        bob = make_user("Bob")
        carol = make_user("Carol")
        befriend(db, alice, bob)
        befriend(db, alice, carol)
        run = make_workout(alice, "2024-05-01T08:00:00")
        react_to_workout(db, bob.id, run.id, "🔥")
        set_preferences(db, alice, reactions_friends_can_see=False)

        assert list_reactions(db, run.id, carol.id) == []
        assert [s.count for s in list_reactions(db, run.id, alice.id)] == [1]

    def test_names_hidden_but_counts_kept(self, db, make_user, make_workout):
        alice = make_user("Alice")
        bob = make_user("Bob")
        carol = make_user("Carol")
        befriend(db, alice, bob)
        befriend(db, alice, carol)
        run = make_workout(alice, "2024-05-01T08:00:00")
        react_to_workout(db, bob.id, run.id, "🔥")
        react_to_workout(db, carol.id, run.id, "🔥")
        set_preferences(db, alice, reactions_show_names=False)

        seen_by_bob = list_reactions(db, run.id, bob.id)[0]
        assert seen_by_bob.count == 2
        assert seen_by_bob.users == []
        assert seen_by_bob.current_user_reaction == "🔥"

        seen_by_owner = list_reactions(db, run.id, alice.id)[0]
        assert {u.id for u in seen_by_owner.users} == {bob.id, carol.id}


class TestReactionEndpoints:
    def test_react_list_and_remove(self, client, db, make_user, make_workout, auth_headers):
        alice = make_user("Alice")
        bob = make_user("Bob")
        befriend(db, alice, bob)
        run = make_workout(alice, "2024-05-01T08:00:00")

        response = client.post(
            "/api/reactions",
            json={"workoutId": run.id, "emoji": "💪"},
            headers=auth_headers(bob),
        )
        assert response.status_code == 201
        reactions = response.json()["reactions"]
        assert [(r["emoji"], r["count"], r["currentUserReaction"]) for r in reactions] == [("💪", 1, "💪")]
        assert reactions[0]["users"][0]["id"] == bob.id

        response = client.get(f"/api/reactions/workout/{run.id}", headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json()["reactions"][0]["currentUserReaction"] is None

        response = client.delete(f"/api/reactions/{run.id}", headers=auth_headers(bob))
        assert response.status_code == 200
        assert response.json() == {"reactions": []}

    def test_unsupported_emoji(self, client, db, make_user, make_workout, auth_headers):
        alice = make_user("Alice")
        bob = make_user("Bob")
        befriend(db, alice, bob)
        run = make_workout(alice, "2024-05-01T08:00:00")

        response = client.post(
            "/api/reactions",
            json={"workoutId": run.id, "emoji": "🐍"},
            headers=auth_headers(bob),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    def test_stranger_gets_not_found(self, client, make_user, make_workout, auth_headers):
        alice = make_user("Alice")
        mallory = make_user("Mallory")
        run = make_workout(alice, "2024-05-01T08:00:00")

        response = client.post(
            "/api/reactions",
            json={"workoutId": run.id, "emoji": "🔥"},
            headers=auth_headers(mallory),
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Workout not found"}

    def test_requires_authentication(self, client):
        assert client.get("/api/reactions/workout/anything").status_code == 401
