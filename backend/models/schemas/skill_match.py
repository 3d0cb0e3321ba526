"""Scoring oracle output for the skill-match assist call."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SkillMatchResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    match_score: int = Field(ge=0, le=100)
    matched_skills: list[str] = []
    missing_skills: list[str] = []
    recommendations: list[str] = []
