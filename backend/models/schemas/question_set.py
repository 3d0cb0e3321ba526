"""Scoring oracle output for multiple-choice question generation."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

OPTIONS_PER_QUESTION = 4


class Question(BaseModel):
    """One generated item: exactly four options, correct index in [0, 3]."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question: str
    options: list[str] = Field(min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_answer: int = Field(ge=0, le=OPTIONS_PER_QUESTION - 1, strict=True)
    explanation: str = ""


class QuestionSet(BaseModel):
    questions: list[Question]
