"""
Tests for user search
"""

from app.modules.friendships.services.friend_request import create_request
from app.modules.friendships.services.friendship import add_edge
from app.modules.user_management.services.search import (
    extract_search_term,
    name_sort_key,
    search_users,
)


class TestSearchTerm:
    def test_trims_whitespace(self):
        assert extract_search_term("  bob  ") == "bob"

    def test_short_or_missing_terms(self):
        assert extract_search_term(None) is None
        assert extract_search_term("") is None
        assert extract_search_term("  b  ") is None

    def test_sort_key_ignores_case_and_accents(self):
        assert name_sort_key("Élodie") == name_sort_key("elodie")
        assert name_sort_key(None) == ""


class TestSearchUsers:
    def test_matches_first_name_without_returning_self(self, db, make_user):
        bob = make_user("Bob", "Builder", email="bravo@example.com")
        searcher = make_user("Bobby", "Searcher", email="searcher@example.com")

        results = search_users(db, searcher.id, "bo")

        assert [r.id for r in results] == [bob.id]

    def test_matches_last_name_case_insensitively(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        stone = make_user("Sharon", "Stone", email="charlie@example.com")

        results = search_users(db, searcher.id, "STO")

        assert [r.id for r in results] == [stone.id]

    def test_matches_nickname_and_email(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        runner = make_user("Robert", nickname="Roadrunner", email="bravo@example.com")
        mailer = make_user("Carol", email="marathon.queen@example.com")

        assert [r.id for r in search_users(db, searcher.id, "roadrun")] == [runner.id]
        assert [r.id for r in search_users(db, searcher.id, "marathon")] == [mailer.id]

    def test_short_query_returns_nothing(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        make_user("Bob", email="bravo@example.com")

        assert search_users(db, searcher.id, "b") == []
        assert search_users(db, searcher.id, " ") == []
        assert search_users(db, searcher.id, None) == []

    def test_wildcards_are_matched_literally(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        make_user("Bob", email="bravo@example.com")

        assert search_users(db, searcher.id, "%%") == []
        assert search_users(db, searcher.id, "__") == []

    def test_accented_names_sort_with_unaccented_ones(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        zoe = make_user("Zoe", "Martin", email="z@example.com")
        eric = make_user("Eric", "Martin", email="e@example.com")
        elodie = make_user("Élodie", "Martin", email="el@example.com")

        results = search_users(db, searcher.id, "martin")

        assert [r.id for r in results] == [elodie.id, eric.id, zoe.id]

    def test_inactive_users_are_hidden(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        gone = make_user("Bob", email="bravo@example.com")
        gone.is_active = False
        db.commit()

        assert search_users(db, searcher.id, "bob") == []

    def test_private_profiles_are_hidden(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        private = make_user("Bob", "Private", email="bravo@example.com")
        public = make_user("Bob", "Public", email="charlie@example.com")
        private.public_profile = False
        db.commit()

        assert [r.id for r in search_users(db, searcher.id, "bob")] == [public.id]

    def test_exclude_connected(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        friend = make_user("Sam", "Friend", email="s1@example.com")
        requested = make_user("Sam", "Pending", email="s2@example.com")
        stranger = make_user("Sam", "Stranger", email="s3@example.com")
        add_edge(db, searcher.id, friend.id)
        db.commit()
        create_request(db, requested.id, searcher.id)

        everyone = search_users(db, searcher.id, "sam")
        unconnected = search_users(db, searcher.id, "sam", exclude_connected=True)

        assert len(everyone) == 3
        assert [r.id for r in unconnected] == [stranger.id]

    def test_limit_and_page(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        runners = [
            make_user(f"Runner{index}", email=f"r{index}@example.com")
            for index in range(4)
        ]

        first_page = search_users(db, searcher.id, "runner", page=1, limit=3)
        second_page = search_users(db, searcher.id, "runner", page=2, limit=3)

        assert [r.id for r in first_page] == [u.id for u in runners[:3]]
        assert [r.id for r in second_page] == [runners[3].id]

    def test_result_shape(self, db, make_user):
        searcher = make_user("Alice", email="alpha@example.com")
        bob = make_user(
            "Bob",
            "Brown",
            email="bravo@example.com",
            nickname="Bobcat",
            display_preference="nickname",
        )

        result = search_users(db, searcher.id, "brown")[0]

        assert result.id == bob.id
        assert result.email == "bravo@example.com"
        assert result.display_name == "Bobcat"
        assert result.last_name == "Brown"
