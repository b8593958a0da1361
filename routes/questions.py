# routes/questions.py
from fastapi import APIRouter, Depends, HTTPException, Query
from bson import ObjectId
from typing import Optional
import logging

from database import get_db, to_object_ids, stringify_ids
from models.question import QuestionReview, serialize_question
from models.question_filter import QuestionFilter
from routes.auth import get_current_user, require_user_type
from services.composer import compose_questions
from services.query_builder import build_question_query, split_csv
from services.question_store import QuestionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/questions", tags=["questions"])

BATCH_PROJECTION = {"_id": 1, "subject": 1, "topic": 1, "question": 1, "difficulty_level": 1, "class": 1}


async def _fetch(params: QuestionFilter, db, student_view: bool):
    logger.info(f"Fetching questions (student_view={student_view}): {params.model_dump(exclude={'trackedQuestions'})}")
    try:
        questions = await compose_questions(QuestionStore(db.Questions), params, student_view=student_view)
        return [serialize_question(q, moderator_view=params.moderatorView) for q in questions]
    except Exception as e:
        logger.error(f"Failed to fetch questions: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch questions")


@router.post("/")
async def get_questions(params: QuestionFilter, db=Depends(get_db)):
    return await _fetch(params, db, student_view=False)


@router.post("/practice")
async def get_practice_questions(params: QuestionFilter, db=Depends(get_db)):
    return await _fetch(params, db, student_view=True)


@router.post("/count")
async def count_questions(params: QuestionFilter, db=Depends(get_db)):
    try:
        count = await QuestionStore(db.Questions).count_documents(build_question_query(params))
    except Exception as e:
        logger.error(f"Error counting questions: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"count": count}


@router.get("/batch")
async def get_questions_batch(ids: Optional[str] = Query(None), db=Depends(get_db)):
    if not ids:
        raise HTTPException(status_code=400, detail="No question IDs provided")
    object_ids = to_object_ids(split_csv(ids), "question id")
    if not object_ids:
        return {"questions": []}
    try:
        questions = await db.Questions.find({"_id": {"$in": object_ids}}, BATCH_PROJECTION).to_list(None)
    except Exception as e:
        logger.error(f"Error fetching questions batch: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"questions": stringify_ids(questions)}


@router.patch("/{id}")
async def review_question(id: str, review: QuestionReview, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    require_user_type(current_user, "reviewer", "moderator", detail="Only reviewers and moderators can update questions")
    if review.asModerator:
        require_user_type(current_user, "moderator", detail="Only moderators can set moderator values")
    if not ObjectId.is_valid(id):
        raise HTTPException(status_code=400, detail="Invalid question ID")

    update = review.to_update()
    if not update:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    logger.info(f"Updating question {id} with {update}, current_user={current_user['_id']}")
    try:
        result = await db.Questions.update_one({"_id": ObjectId(id)}, {"$set": update})
    except Exception as e:
        logger.error(f"Error updating question: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Question not found")
    return {"success": True, "message": "Question updated successfully"}


@router.delete("/{id}")
async def delete_question(id: str, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    require_user_type(current_user, "moderator", detail="Only moderators can delete questions")
    if not ObjectId.is_valid(id):
        raise HTTPException(status_code=400, detail="Invalid question ID")
    result = await db.Questions.delete_one({"_id": ObjectId(id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Question not found")
    return {"message": "Question deleted"}
