"""Tests for capacity-limited assignment selection."""

from unittest.mock import patch

import pytest

from datagraph.config import QUALIFICATION_THRESHOLD
from datagraph.matching.selector import (
    InvalidAssignmentInput,
    qualifies,
    select_assignments,
)
from datagraph.schemas.candidate import CandidateProfile
from datagraph.schemas.project import Project
from tests.test_utils import make_test_candidate, make_test_project


class TestQualifies:
    def test_above_threshold(self):
        assert qualifies(0.5)

    def test_exact_threshold(self):
        assert qualifies(QUALIFICATION_THRESHOLD)

    def test_within_float_tolerance(self):
        assert qualifies(QUALIFICATION_THRESHOLD - 1e-12)

    def test_below_threshold(self):
        assert not qualifies(0.29)


class TestSelectAssignments:
    def test_writing_scenario(self):
        project = make_test_project(skills=["Writing"], max_assignments=2)
        candidates = [
            make_test_candidate("a", skills=["writing"]),
            make_test_candidate("b", skills=["design"]),
            make_test_candidate("c", skills=["Writing", "Design"]),
        ]

        results = select_assignments(project, candidates)

        assert [r.candidate_id for r in results] == ["a", "c"]
        assert all(r.score == pytest.approx(1.0) for r in results)

    def test_at_capacity_returns_empty_without_scoring(self):
        project = make_test_project(
            skills=["Writing"], max_assignments=2, current_assigned_count=2
        )
        candidates = [make_test_candidate("a", skills=["writing"])]

        with patch("datagraph.matching.selector.compute_match_score") as mock_score:
            results = select_assignments(project, candidates)

        assert results == []
        mock_score.assert_not_called()

    def test_truncates_to_remaining_slots(self):
        project = make_test_project(
            skills=["Python"], max_assignments=5, current_assigned_count=3
        )
        candidates = [make_test_candidate(f"u{i}", skills=["python"]) for i in range(6)]

        results = select_assignments(project, candidates)

        assert len(results) == 2

    def test_sorted_by_score_descending(self):
        project = make_test_project(skills=["A", "B", "C", "D"], max_assignments=10)
        candidates = [
            make_test_candidate("low", skills=["a", "b"]),
            make_test_candidate("high", skills=["a", "b", "c", "d"]),
            make_test_candidate("mid", skills=["a", "b", "c"]),
        ]

        results = select_assignments(project, candidates)

        assert [r.candidate_id for r in results] == ["high", "mid", "low"]
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_ties_broken_by_candidate_id(self):
        project = make_test_project(languages=["English"], max_assignments=3)
        candidates = [
            make_test_candidate("zoe", languages=["english"]),
            make_test_candidate("adam", languages=["English"]),
            make_test_candidate("mia", languages=["ENGLISH"]),
        ]

        results = select_assignments(project, candidates)

        assert [r.candidate_id for r in results] == ["adam", "mia", "zoe"]

    def test_excludes_candidates_below_threshold(self):
        project = make_test_project(skills=["A", "B", "C", "D"], max_assignments=10)
        candidates = [
            make_test_candidate("one", skills=["a"]),  # 0.25
            make_test_candidate("two", skills=["a", "b"]),  # 0.5
        ]

        results = select_assignments(project, candidates)

        assert [r.candidate_id for r in results] == ["two"]
        assert all(r.score >= QUALIFICATION_THRESHOLD for r in results)

    def test_boundary_score_qualifies(self):
        # 0 * 0.4 + 1 * 0.3 + 0 * 0.3 over 1.0 lands on the threshold
        project = make_test_project(
            skills=["Python"], languages=["English"], experience="advanced"
        )
        candidate = make_test_candidate(
            "edge", skills=["Go"], languages=["english"], experience="beginner"
        )

        results = select_assignments(project, [candidate])

        assert len(results) == 1
        assert results[0].score == pytest.approx(0.3)

    def test_project_without_requirements_selects_nobody(self):
        project = make_test_project(max_assignments=3)
        candidates = [make_test_candidate("a", skills=["Python"], languages=["English"])]

        assert select_assignments(project, candidates) == []

    def test_empty_pool(self):
        project = make_test_project(skills=["Python"])

        assert select_assignments(project, []) == []

    def test_custom_threshold(self):
        project = make_test_project(skills=["A", "B"], max_assignments=5)
        candidates = [make_test_candidate("a", skills=["a"])]  # 0.5

        assert select_assignments(project, candidates, threshold=0.6) == []
        assert len(select_assignments(project, candidates, threshold=0.5)) == 1

    def test_accepts_generator(self):
        project = make_test_project(skills=["Python"])
        candidates = (make_test_candidate(f"u{i}", skills=["python"]) for i in range(2))

        assert len(select_assignments(project, candidates)) == 2

    def test_never_exceeds_remaining_slots(self):
        candidates = [make_test_candidate(f"u{i}", skills=["python"]) for i in range(8)]
        for max_assignments in range(1, 6):
            for current in range(max_assignments + 1):
                project = make_test_project(
                    skills=["Python"],
                    max_assignments=max_assignments,
                    current_assigned_count=current,
                )
                results = select_assignments(project, candidates)
                assert len(results) <= max_assignments - current


class TestSelectAssignmentsValidation:
    def test_zero_max_assignments_raises(self):
        project = Project.model_construct(
            id="p", title="P", required_skills=["Python"], max_assignments=0
        )

        with pytest.raises(InvalidAssignmentInput):
            select_assignments(project, [make_test_candidate("a", skills=["python"])])

    def test_non_integer_max_assignments_raises(self):
        project = Project.model_construct(
            id="p", title="P", required_skills=["Python"], max_assignments=2.5
        )

        with pytest.raises(InvalidAssignmentInput):
            select_assignments(project, [])

    def test_boolean_max_assignments_raises(self):
        project = Project.model_construct(
            id="p", title="P", required_skills=["Python"], max_assignments=True
        )

        with pytest.raises(InvalidAssignmentInput):
            select_assignments(project, [])

    def test_candidate_without_id_raises_before_scoring(self):
        project = make_test_project(skills=["Python"])
        candidates = [
            make_test_candidate("a", skills=["python"]),
            CandidateProfile.model_construct(id="", skills=["python"]),
        ]

        with patch("datagraph.matching.selector.compute_match_score") as mock_score:
            with pytest.raises(InvalidAssignmentInput):
                select_assignments(project, candidates)

        mock_score.assert_not_called()
