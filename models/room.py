# models/room.py
from pydantic import BaseModel
from typing import List


class RoomCreate(BaseModel):
    name: str
    students: List[str] = []
    question_sets: List[str] = []


class RoomQuestionSet(BaseModel):
    questionSetId: str
