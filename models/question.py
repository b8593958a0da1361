# models/question.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional, Union

# Base field -> moderator override field
MODERATOR_FIELDS = {
    "difficulty_level": "modDifficulty_level",
    "inCourse": "modInCourse",
    "isHOTS": "modIsHOTS",
    "isCorrect": "modIsCorrect",
    "DPS_approved": "modDPS_approved",
    "q_type": "modQ_type",
}

REVIEWABLE_FIELDS = list(MODERATOR_FIELDS) + ["reviewer_note"]


def effective_value(value: Any, override: Any) -> Any:
    return override if override is not None else value


class QuestionBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id")
    label: Optional[str] = None


class TextQuestion(QuestionBase):
    kind: Literal["text"] = "text"
    education_board: Optional[str] = None
    class_: Optional[str] = Field(None, alias="class")
    subject: Optional[str] = None
    topic: Union[str, List[str], None] = None
    q_type: Optional[str] = None
    q_number: Union[int, str, None] = None
    difficulty_level: Optional[str] = None
    question: str = ""
    solution: str = ""
    inCourse: Optional[bool] = None
    isHOTS: Optional[bool] = None
    isCorrect: Optional[bool] = None
    DPS_approved: Optional[bool] = None
    modDifficulty_level: Optional[str] = None
    modInCourse: Optional[bool] = None
    modIsHOTS: Optional[bool] = None
    modIsCorrect: Optional[bool] = None
    modDPS_approved: Optional[bool] = None
    modQ_type: Optional[str] = None
    reviewer_note: Optional[str] = None
    effective: Optional[Dict[str, Any]] = None

    def effective_fields(self) -> Dict[str, Any]:
        """Values a moderator sees: the override wherever one has been set."""
        return {
            field: effective_value(getattr(self, field), getattr(self, mod_field))
            for field, mod_field in MODERATOR_FIELDS.items()
        }


class PdfQuestion(QuestionBase):
    kind: Literal["pdf"] = "pdf"
    question_pdf_blob: str
    solution_pdf_blob: Optional[str] = None


Question = Union[TextQuestion, PdfQuestion]


def parse_question(doc: dict) -> Question:
    """A stored row is a PDF pair when it has a question PDF blob, otherwise a text question."""
    data = dict(doc)
    data["_id"] = str(data["_id"])
    if data.get("question_pdf_blob"):
        return PdfQuestion.model_validate(data)
    return TextQuestion.model_validate(data)


def serialize_question(doc: dict, moderator_view: bool = False) -> dict:
    question = parse_question(doc)
    if moderator_view and isinstance(question, TextQuestion):
        question.effective = question.effective_fields()
    return question.model_dump(by_alias=True, exclude_none=True)


class QuestionReview(BaseModel):
    difficulty_level: Optional[str] = None
    inCourse: Optional[bool] = None
    isHOTS: Optional[bool] = None
    isCorrect: Optional[bool] = None
    DPS_approved: Optional[bool] = None
    q_type: Optional[str] = None
    reviewer_note: Optional[str] = None
    asModerator: bool = False

    def to_update(self) -> dict:
        """Fields explicitly sent, mapped onto the moderator overrides when reviewing as a moderator."""
        values = self.model_dump(exclude_unset=True, exclude={"asModerator"})
        if not self.asModerator:
            return values
        return {MODERATOR_FIELDS.get(field, field): value for field, value in values.items()}
