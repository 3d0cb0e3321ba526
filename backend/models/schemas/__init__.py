"""Contracts exchanged with the scoring oracle."""

from models.schemas.assessment import (
    EducationAnalysis,
    ExperienceAnalysis,
    ResumeAssessment,
    SkillAnalysis,
)
from models.schemas.question_set import Question, QuestionSet
from models.schemas.resume_data import (
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    ResumeClaims,
)
from models.schemas.skill_match import SkillMatchResult

__all__ = [
    "CertificationEntry",
    "EducationAnalysis",
    "EducationEntry",
    "ExperienceAnalysis",
    "ExperienceEntry",
    "ProjectEntry",
    "Question",
    "QuestionSet",
    "ResumeAssessment",
    "ResumeClaims",
    "SkillAnalysis",
    "SkillMatchResult",
]
