"""
Heuristic matcher tests.

Tests for:
- Edit distance and normalized similarity
- Name normalization
- Candidate selection, thresholds and ordering
"""

import pytest

from docsguard.heuristic import (
    compute_confidence,
    find_candidates,
    levenshtein_distance,
    normalize_name,
    similarity,
)
from tests.helpers import entity, section


class TestSimilarity:
    def test_distance(self):
        """Classic edit distances."""
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "abc") == 0

    def test_identical_is_one(self):
        """Identical names are fully similar."""
        assert similarity("login", "login") == 1.0

    def test_both_empty_is_one(self):
        assert similarity("", "") == 1.0

    def test_bounds(self):
        """Similarity stays within [0, 1]."""
        assert similarity("abc", "xyz") == 0.0
        assert 0.0 <= similarity("login", "logout") <= 1.0

    def test_symmetric(self):
        """Similarity does not depend on argument order."""
        assert similarity("createUser", "create user") == similarity(
            "create user", "createUser"
        )

    def test_normalize_name(self):
        """Separators collapse to single spaces, lowercased."""
        assert normalize_name("auth-login") == "auth login"
        assert normalize_name("create_user") == "create user"
        assert normalize_name("User.Create") == "user create"
        assert normalize_name("  a--b  ") == "a b"


class TestConfidence:
    def test_title_match(self):
        """A function name matching the title is a perfect match."""
        assert compute_confidence("login", section("auth-login", title="Login")) == 1.0

    def test_id_match(self):
        """snake_case names match kebab-case ids."""
        assert compute_confidence("create_user", section("create-user")) == 1.0

    def test_best_of_id_and_title(self):
        """The better of id and title counts."""
        by_id = compute_confidence("logout", section("logout", title="Sign out"))
        assert by_id == 1.0

    def test_camel_case_close_to_kebab(self):
        """camelCase is one edit away from its kebab-case id."""
        confidence = compute_confidence("createUser", section("create-user"))
        assert confidence == pytest.approx(1 - 1 / 11)


class TestFindCandidates:
    def test_suggests_matching_section(self):
        """A suggestion carries entity and section details."""
        candidates = find_candidates(
            [entity("login", line=3)],
            [section("auth-login", title="Login"), section("billing")],
        )
        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.entity_index == 0
        assert candidate.function_name == "login"
        assert candidate.location == "src/auth.ts:3"
        assert candidate.section_id == "auth-login"
        assert candidate.section_title == "Login"
        assert candidate.confidence == 1.0

    def test_below_threshold(self):
        """Dissimilar names produce no suggestion."""
        assert find_candidates([entity("fetchData")], [section("delete-account")]) == []

    def test_threshold_is_inclusive(self):
        """A confidence equal to the threshold is suggested."""
        candidates = find_candidates([entity("logn")], [section("login")])
        assert len(candidates) == 1
        assert candidates[0].confidence == pytest.approx(0.8)

    def test_custom_threshold(self):
        """A stricter threshold drops weak matches."""
        assert find_candidates([entity("logn")], [section("login")], min_confidence=0.9) == []

    def test_linked_entities_skipped(self):
        """Functions that already have a doc id get no suggestion."""
        candidates = find_candidates(
            [entity("login", doc_id="something-else")], [section("login")]
        )
        assert candidates == []

    def test_linked_sections_skipped(self):
        """Sections already linked are not offered again."""
        candidates = find_candidates(
            [entity("login", doc_id="login"), entity("login_v2")],
            [section("login")],
        )
        assert candidates == []

    def test_tie_keeps_first_section(self):
        """On equal confidence the first section wins."""
        candidates = find_candidates(
            [entity("login")],
            [section("login", title="Login"), section("auth", title="login")],
        )
        assert candidates[0].section_id == "login"

    def test_sorted_by_confidence(self):
        """Suggestions are ordered by descending confidence."""
        candidates = find_candidates(
            [entity("logn"), entity("logout")],
            [section("login"), section("logout")],
        )
        assert [c.function_name for c in candidates] == ["logout", "logn"]
        assert [c.entity_index for c in candidates] == [1, 0]

    def test_equal_confidence_keeps_entity_order(self):
        """Equal confidences keep source order."""
        candidates = find_candidates(
            [entity("beta"), entity("alpha")],
            [section("alpha"), section("beta")],
        )
        assert [c.function_name for c in candidates] == ["beta", "alpha"]

    def test_at_most_one_per_entity(self):
        """Each function gets at most one suggestion."""
        candidates = find_candidates(
            [entity("login")], [section("login"), section("logins")]
        )
        assert len(candidates) == 1
