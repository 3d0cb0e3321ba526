"""Scoring oracle output for resume assessment.

The oracle answers in camelCase JSON; every field below is decoded strictly.
A response that does not validate is treated as an oracle failure, never
patched up with defaults.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _OracleModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SkillAnalysis(_OracleModel):
    skill: str
    verified: bool
    confidence: float = Field(ge=0, le=100)
    evidence: str = ""


class EducationAnalysis(_OracleModel):
    institution: str = ""
    verified: bool
    confidence: float = Field(ge=0, le=100)


class ExperienceAnalysis(_OracleModel):
    company: str = ""
    verified: bool
    confidence: float = Field(ge=0, le=100)


class ResumeAssessment(_OracleModel):
    """Credibility assessment of one resume (0-100)."""
    score: int = Field(ge=0, le=100, strict=True)
    overall_assessment: str
    skills_analysis: list[SkillAnalysis]
    education_analysis: list[EducationAnalysis]
    experience_analysis: list[ExperienceAnalysis]
    red_flags: list[str]
    strengths: list[str]
    recommendations: list[str] = []
