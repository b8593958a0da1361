# routes/students.py
from fastapi import APIRouter, Depends, HTTPException
from bson import ObjectId
from datetime import datetime, timedelta
import logging
import time

from config import ACTIVITY_RETENTION_DAYS
from database import get_db, stringify_ids
from models.user import PRIVATE_USER_FIELDS, QuestionAttempt, QuestionSetCompletion, UserActivity
from routes.auth import get_current_user, require_user_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["students"])


@router.post("/track-student-questions")
async def track_question(attempt: QuestionAttempt, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    if not ObjectId.is_valid(attempt.questionId):
        raise HTTPException(status_code=400, detail="Invalid request parameters")
    path = f"question_tracking.{attempt.questionId}"
    try:
        await db.Users.update_one(
            {"_id": current_user["_id"]},
            {
                "$set": {
                    f"{path}.status": attempt.status,
                    f"{path}.timestamp": int(time.time() * 1000),
                    f"{path}.isPdfQuestionSet": attempt.isPdfQuestionSet,
                },
                "$inc": {f"{path}.attempts": 1},
            },
        )
    except Exception as e:
        logger.error(f"Error tracking question status: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"success": True}


@router.get("/track-student-questions")
async def get_tracked_questions(current_user: dict = Depends(get_current_user)):
    return current_user.get("question_tracking") or {}


@router.post("/store-completion-stats")
async def store_completion_stats(completion: QuestionSetCompletion, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    if not ObjectId.is_valid(completion.questionSetId):
        raise HTTPException(status_code=400, detail="Invalid question set ID format")
    stats = completion.model_dump(exclude={"questionSetId"})
    stats["completedAt"] = datetime.utcnow()
    try:
        await db.Users.update_one(
            {"_id": current_user["_id"]},
            {"$set": {f"question_sets_tracking.{completion.questionSetId}": stats}},
        )
    except Exception as e:
        logger.error(f"Error storing completion stats: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"message": "Question set completion statistics saved successfully"}


def _drop_stale_activities(now: datetime) -> dict:
    return {"$pull": {"recentActivities": {"timestamp": {"$lt": now - timedelta(days=ACTIVITY_RETENTION_DAYS)}}}}


@router.post("/user-activity")
async def track_activity(activity: UserActivity, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    now = datetime.utcnow()
    entry = {"type": activity.activityType, "timestamp": now, **activity.metadata.model_dump()}
    updates = {"lastActive": now}
    if activity.activityType == "login":
        updates["lastLogin"] = now
    try:
        await db.Users.update_one(
            {"_id": current_user["_id"], "recentActivities": {"$exists": True}},
            _drop_stale_activities(now),
        )
        await db.Users.update_one(
            {"_id": current_user["_id"]},
            {
                "$push": {"recentActivities": entry},
                "$inc": {f"activityCounts.{activity.activityType}": 1},
                "$set": updates,
            },
        )
    except Exception as e:
        logger.error(f"Error tracking user activity: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"success": True}


@router.post("/maintenance/cleanup-activities")
async def cleanup_activities(db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    require_user_type(current_user, "moderator", detail="Only moderators can run maintenance tasks")
    try:
        result = await db.Users.update_many(
            {"recentActivities": {"$exists": True}},
            _drop_stale_activities(datetime.utcnow()),
        )
    except Exception as e:
        logger.error(f"Error during activity data cleanup: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    logger.info(f"Cleaned up old activity data for {result.modified_count} users")
    return {"success": True, "modified": result.modified_count}


@router.post("/user/decrement-pdf-limit")
async def decrement_pdf_limit(db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    try:
        result = await db.Users.update_one(
            {"_id": current_user["_id"], "pdf_limit_count": {"$gt": 0}},
            {"$inc": {"pdf_limit_count": -1}},
        )
    except Exception as e:
        logger.error(f"Error decrementing PDF limit: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if result.modified_count == 0:
        raise HTTPException(status_code=400, detail="Failed to update PDF limit or limit already reached")
    return {"success": True}


@router.get("/student/{id}")
async def get_student(id: str, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    require_user_type(current_user, "teacher", detail="Access denied: Only teachers can view student details")
    if not ObjectId.is_valid(id):
        raise HTTPException(status_code=400, detail="Invalid student ID format")
    student_id = ObjectId(id)

    shared_room = await db.Rooms.find_one({"teachers": current_user["_id"], "students": student_id})
    if not shared_room:
        raise HTTPException(status_code=403, detail="Access denied: You are not authorized to view this student's data")

    student = await db.Users.find_one({"_id": student_id}, PRIVATE_USER_FIELDS)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return {"student": stringify_ids(student)}
