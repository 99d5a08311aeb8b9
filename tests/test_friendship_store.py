"""
Tests for canonical friendship storage
"""

import pytest

from app.core.exceptions import Forbidden, InvalidTarget, NotFound
from app.modules.friendships.models.friendship import Friendship
from app.modules.friendships.services.friendship import (
    add_edge,
    canonical_pair,
    get_edge,
    get_friend_ids,
    has_edge,
    list_friends,
    remove_edge,
)


class TestCanonicalPair:
    def test_order_is_independent_of_argument_order(self):
        assert canonical_pair("b", "a") == ("a", "b")
        assert canonical_pair("a", "b") == ("a", "b")

    def test_uuid_like_ids(self):
        low, high = canonical_pair("f0e1", "0a9b")
        assert low < high


class TestAddEdge:
    def test_edge_is_stored_once_in_canonical_order(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")

        edge = add_edge(db, bob.id, alice.id)
        db.commit()

        assert (edge.user_one_id, edge.user_two_id) == canonical_pair(alice.id, bob.id)
        assert db.query(Friendship).count() == 1

    def test_repeated_insert_is_a_no_op(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")

        first = add_edge(db, alice.id, bob.id)
        db.commit()
        second = add_edge(db, bob.id, alice.id)
        db.commit()

        assert first.id == second.id
        assert db.query(Friendship).count() == 1

    def test_self_edge_is_rejected(self, db, make_user):
        alice = make_user("Alice")

        with pytest.raises(InvalidTarget):
            add_edge(db, alice.id, alice.id)

    def test_lookup_works_from_either_side(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")
        add_edge(db, alice.id, bob.id)
        db.commit()

        assert has_edge(db, alice.id, bob.id)
        assert has_edge(db, bob.id, alice.id)
        assert get_edge(db, alice.id, bob.id).id == get_edge(db, bob.id, alice.id).id


class TestListFriends:
    def test_both_sides_see_each_other(self, db, make_user):
        alice = make_user("Alice", "Anderson")
        bob = make_user("Bob", "Brown", avatar_url="https://cdn.example.com/bob.png")
        add_edge(db, alice.id, bob.id)
        db.commit()

        alice_friends = list_friends(db, alice.id)
        bob_friends = list_friends(db, bob.id)

        assert [f.id for f in alice_friends] == [bob.id]
        assert [f.id for f in bob_friends] == [alice.id]
        assert alice_friends[0].friendship_id == bob_friends[0].friendship_id
        assert alice_friends[0].display_name == "Bob"
        assert alice_friends[0].avatar_url == "https://cdn.example.com/bob.png"

    def test_newest_friendship_first(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")
        carol = make_user("Carol")
        add_edge(db, alice.id, bob.id)
        db.commit()
        add_edge(db, carol.id, alice.id)
        db.commit()

        assert [f.id for f in list_friends(db, alice.id)] == [carol.id, bob.id]

    def test_display_preference_is_respected(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Robert", "Brown", nickname="Bobby", display_preference="nickname")
        carol = make_user("Carol", "Clark", display_preference="fullName")
        add_edge(db, alice.id, bob.id)
        add_edge(db, alice.id, carol.id)
        db.commit()

        names = {f.id: f.display_name for f in list_friends(db, alice.id)}
        assert names[bob.id] == "Bobby"
        assert names[carol.id] == "Carol Clark"

    def test_friend_ids(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")
        carol = make_user("Carol")
        add_edge(db, alice.id, bob.id)
        add_edge(db, carol.id, alice.id)
        db.commit()

        assert sorted(get_friend_ids(db, alice.id)) == sorted([bob.id, carol.id])
        assert get_friend_ids(db, bob.id) == [alice.id]

    def test_no_friends_is_an_empty_list(self, db, make_user):
        loner = make_user("Lone")
        assert list_friends(db, loner.id) == []


class TestRemoveEdge:
    def test_either_party_can_unfriend(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")
        edge = add_edge(db, alice.id, bob.id)
        db.commit()

        remove_edge(db, edge.id, bob.id)

        assert not has_edge(db, alice.id, bob.id)
        assert list_friends(db, alice.id) == []
        assert list_friends(db, bob.id) == []

    def test_stranger_cannot_unfriend(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")
        mallory = make_user("Mallory")
        edge = add_edge(db, alice.id, bob.id)
        db.commit()

        with pytest.raises(Forbidden):
            remove_edge(db, edge.id, mallory.id)
        assert has_edge(db, alice.id, bob.id)

    def test_repeated_delete_reports_not_found(self, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")
        edge = add_edge(db, alice.id, bob.id)
        db.commit()
        edge_id = edge.id

        remove_edge(db, edge_id, alice.id)
        with pytest.raises(NotFound):
            remove_edge(db, edge_id, alice.id)
