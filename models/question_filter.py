# models/question_filter.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional, Union

from config import DEFAULT_PAGE_SIZE


class QuestionFilter(BaseModel):
    """Flat filter bag sent by the question bank and practice screens."""

    model_config = ConfigDict(populate_by_name=True)

    education_board: str = Field("", validation_alias=AliasChoices("education_board", "board"))
    class_: str = Field("", validation_alias=AliasChoices("class", "class_"))
    subject: str = ""
    topic: str = ""
    difficulty_level: str = ""
    q_type: str = ""
    q_number: Optional[Union[int, str]] = None
    inCourse: str = ""
    isHOTS: str = ""
    isCorrect: str = ""
    DPS_approved: str = ""
    moderatorView: bool = False
    page: int = 1
    amount: int = Field(DEFAULT_PAGE_SIZE, validation_alias=AliasChoices("amount", "limit"))
    userId: Optional[str] = None
    trackedQuestions: Optional[Union[str, Dict[str, Any]]] = None

    @field_validator(
        "education_board", "class_", "subject", "topic", "difficulty_level", "q_type",
        "inCourse", "isHOTS", "isCorrect", "DPS_approved",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else str(value)

    @field_validator("page", mode="before")
    @classmethod
    def parse_page(cls, value):
        return _positive_int(value, 1)

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value):
        return _positive_int(value, DEFAULT_PAGE_SIZE)


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
