# models/question_set.py
from pydantic import BaseModel
from typing import List, Literal, Optional


class QuestionSetCreate(BaseModel):
    label: str
    questions: List[str]
    format: Literal["dps", "freeform"] = "dps"


class QuestionSetFetch(BaseModel):
    q: Optional[str] = None


class PdfQuestionSetLookup(BaseModel):
    ids: List[str] = []
