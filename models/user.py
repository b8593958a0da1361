# models/user.py
from pydantic import BaseModel, Field
from typing import Literal, Optional

TrackingStatus = Literal["success", "failed", "unsure"]
ActivityType = Literal["login", "logout", "session_ping"]

# Users never need these back from the API
PRIVATE_USER_FIELDS = {"password": 0, "password_reset_token": 0, "password_reset_expiry": 0}


class QuestionAttempt(BaseModel):
    questionId: str
    status: TrackingStatus
    isPdfQuestionSet: bool = False


class SessionResults(BaseModel):
    success: int = 0
    failed: int = 0
    unsure: int = 0


class QuestionSetCompletion(BaseModel):
    questionSetId: str
    questionSetLabel: Optional[str] = None
    sessionStartTime: Optional[float] = None
    sessionDuration: float = 0
    totalQuestions: int = 0
    totalAnswered: int = 0
    results: SessionResults = Field(default_factory=SessionResults)
    successRate: float = 0


class ActivityMetadata(BaseModel):
    sessionDuration: Optional[float] = None
    page: Optional[str] = None


class UserActivity(BaseModel):
    activityType: ActivityType
    metadata: ActivityMetadata = Field(default_factory=ActivityMetadata)


class LoginEvent(BaseModel):
    role: Literal["teacher", "student"]
