"""Tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError

from datagraph.schemas.candidate import CandidateProfile, User
from datagraph.schemas.match import Assignment, AssignmentReport, MatchResult
from datagraph.schemas.project import ExperienceLevel, Project


class TestExperienceLevel:
    def test_case_insensitive_lookup(self):
        assert ExperienceLevel("advanced") == ExperienceLevel.ADVANCED
        assert ExperienceLevel("ADVANCED") == ExperienceLevel.ADVANCED
        assert ExperienceLevel("Advanced") == ExperienceLevel.ADVANCED

    def test_ordinals(self):
        assert ExperienceLevel.BEGINNER == 0
        assert ExperienceLevel.INTERMEDIATE == 1
        assert ExperienceLevel.ADVANCED == 2
        assert ExperienceLevel.EXPERT == 3

    def test_invalid_level_raises(self):
        with pytest.raises(ValueError):
            ExperienceLevel("guru")

    def test_label(self):
        assert ExperienceLevel.INTERMEDIATE.label == "Intermediate"


class TestProject:
    def test_valid_project(self):
        project = Project(
            id="p1",
            title="Translate prompts",
            required_skills=["Translation"],
            required_languages=["Spanish", "English"],
            required_experience="Intermediate",
            max_assignments=3,
        )
        assert project.required_experience == ExperienceLevel.INTERMEDIATE
        assert project.is_active is True
        assert project.is_published is False
        assert project.current_assigned_count == 0

    def test_max_assignments_must_be_positive(self):
        with pytest.raises(ValidationError):
            Project(id="p1", title="T", max_assignments=0)

    def test_negative_assigned_count_rejected(self):
        with pytest.raises(ValidationError):
            Project(id="p1", title="T", max_assignments=2, current_assigned_count=-1)

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Project(id="", title="T", max_assignments=2)

    def test_invalid_experience_rejected(self):
        with pytest.raises(ValidationError):
            Project(id="p1", title="T", max_assignments=2, required_experience="guru")

    def test_blank_experience_is_none(self):
        project = Project(id="p1", title="T", max_assignments=2, required_experience="")
        assert project.required_experience is None

    def test_blank_terms_dropped(self):
        project = Project(
            id="p1", title="T", max_assignments=2, required_skills=[" Writing ", "", "  "]
        )
        assert project.required_skills == ["Writing"]

    def test_remaining_slots(self):
        project = Project(id="p1", title="T", max_assignments=5, current_assigned_count=2)
        assert project.remaining_slots == 3

    def test_remaining_slots_never_negative(self):
        project = Project(id="p1", title="T", max_assignments=2, current_assigned_count=4)
        assert project.remaining_slots == 0

    def test_is_open(self):
        project = Project(id="p1", title="T", max_assignments=1, is_published=True)
        assert project.is_open
        assert not project.model_copy(update={"is_active": False}).is_open
        assert not project.model_copy(update={"current_assigned_count": 1}).is_open


class TestCandidateProfile:
    def test_missing_id_rejected(self):
        with pytest.raises(ValidationError):
            CandidateProfile(skills=["Python"])

    def test_experience_optional(self):
        candidate = CandidateProfile(id="u1", skills=["Python"])
        assert candidate.experience_level is None
        assert candidate.languages == []

    def test_terms_cleaned_like_requirements(self):
        candidate = CandidateProfile(id="u1", skills=[" Python ", "", "  "], languages=["English "])
        assert candidate.skills == ["Python"]
        assert candidate.languages == ["English"]


class TestUser:
    def test_is_matchable_requires_onboarding(self):
        user = User(id="u1", skills=["Python"], has_onboarded=False)
        assert not user.is_matchable

    def test_is_matchable_requires_skill_or_language(self):
        assert not User(id="u1", has_onboarded=True).is_matchable
        assert User(id="u1", languages=["English"], has_onboarded=True).is_matchable

    def test_to_candidate(self):
        user = User(
            id="u1",
            name="Ana",
            skills=["Python"],
            languages=["English"],
            experience_level="expert",
            has_onboarded=True,
        )
        candidate = user.to_candidate()
        assert type(candidate) is CandidateProfile
        assert candidate.id == "u1"
        assert candidate.experience_level == ExperienceLevel.EXPERT


class TestMatchSchemas:
    def test_score_above_one_rejected(self):
        with pytest.raises(ValidationError):
            MatchResult(candidate_id="u1", score=1.5)

    def test_assignment_defaults_to_assigned(self):
        assignment = Assignment(user_id="u1", project_id="p1", match_score=0.7)
        assert assignment.status == "assigned"

    def test_report_counts_assignments(self):
        report = AssignmentReport(
            project_id="p1",
            assignments=[
                Assignment(user_id="u1", project_id="p1", match_score=0.9),
                Assignment(user_id="u2", project_id="p1", match_score=0.8),
            ],
        )
        assert report.assigned_count == 2
        assert report.message == "Assigned project to 2 users"
        assert report.model_dump()["assigned_count"] == 2
