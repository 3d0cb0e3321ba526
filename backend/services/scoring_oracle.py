"""Scoring oracle: the black-box assessor behind verification and skill tests.

Subclasses must implement:
    - assess_resume(claims): credibility assessment of a resume
    - generate_questions(skill, count): multiple-choice items for a skill
    - match_skills(skills, job_description): skill overlap assist
    - career_advice(claims): free-text advice assist

Decoding is strict: anything that does not validate against the contract in
models.schemas becomes ScoringUnavailable.
"""

import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError

from models.schemas.assessment import ResumeAssessment
from models.schemas.question_set import Question, QuestionSet
from models.schemas.resume_data import ResumeClaims
from models.schemas.skill_match import SkillMatchResult
from services import gemini_client, prompt_builder
from services.errors import ScoringUnavailable

logger = logging.getLogger(__name__)


class ScoringOracle(ABC):

    @abstractmethod
    async def assess_resume(self, claims: ResumeClaims) -> ResumeAssessment:
        """Score the credibility of a resume's claims."""

    @abstractmethod
    async def generate_questions(self, skill: str, count: int) -> list[Question]:
        """Return exactly ``count`` multiple-choice questions for ``skill``."""

    @abstractmethod
    async def match_skills(self, skills: list[str], job_description: str) -> SkillMatchResult:
        """Compare a skill list with a job description."""

    @abstractmethod
    async def career_advice(self, claims: ResumeClaims) -> str:
        """Free-text career advice for a resume."""


def decode_assessment(data: dict) -> ResumeAssessment:
    try:
        return ResumeAssessment.model_validate(data)
    except ValidationError as e:
        logger.error("Assessment failed validation: %s", e.errors()[:3])
        raise ScoringUnavailable("Scoring oracle returned a malformed assessment") from e


def decode_questions(data: dict, count: int) -> list[Question]:
    try:
        question_set = QuestionSet.model_validate(data)
    except ValidationError as e:
        logger.error("Question set failed validation: %s", e.errors()[:3])
        raise ScoringUnavailable("Scoring oracle returned malformed questions") from e

    if len(question_set.questions) != count:
        logger.error(
            "Expected %d questions, oracle returned %d", count, len(question_set.questions)
        )
        raise ScoringUnavailable(
            f"Scoring oracle returned {len(question_set.questions)} questions, expected {count}"
        )
    return question_set.questions


def decode_skill_match(data: dict) -> SkillMatchResult:
    try:
        return SkillMatchResult.model_validate(data)
    except ValidationError as e:
        logger.error("Skill match failed validation: %s", e.errors()[:3])
        raise ScoringUnavailable("Scoring oracle returned a malformed skill match") from e


class GeminiScoringOracle(ScoringOracle):
    """Oracle backed by Google Gemini."""

    async def assess_resume(self, claims: ResumeClaims) -> ResumeAssessment:
        prompt = prompt_builder.build_verification_prompt(claims)
        data = await gemini_client.generate_json(prompt)
        return decode_assessment(data)

    async def generate_questions(self, skill: str, count: int) -> list[Question]:
        prompt = prompt_builder.build_question_prompt(skill, count)
        data = await gemini_client.generate_json(prompt)
        return decode_questions(data, count)

    async def match_skills(self, skills: list[str], job_description: str) -> SkillMatchResult:
        prompt = prompt_builder.build_skill_match_prompt(skills, job_description)
        data = await gemini_client.generate_json(prompt)
        return decode_skill_match(data)

    async def career_advice(self, claims: ResumeClaims) -> str:
        prompt = prompt_builder.build_career_advice_prompt(claims)
        text = await gemini_client.generate_text(prompt, temperature=0.7)
        return text.strip()
