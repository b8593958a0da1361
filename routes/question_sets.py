# routes/question_sets.py
from fastapi import APIRouter, Depends, HTTPException
from bson import ObjectId
from datetime import datetime
from typing import Optional
import logging

from database import get_db, to_object_ids, stringify_ids
from models.question import serialize_question
from models.question_set import QuestionSetCreate, QuestionSetFetch, PdfQuestionSetLookup
from services.question_sets import QuestionSetLayoutError, order_dps_question_ids

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["question_sets"])

PDF_SET_PROJECTION = {"_id": 1, "label": 1, "question_pdf_blob": 1, "solution_pdf_blob": 1}


def _object_id(value: str, detail: str) -> ObjectId:
    if not value or not ObjectId.is_valid(value):
        logger.warning(f"Invalid ObjectId: {value}")
        raise HTTPException(status_code=400, detail=detail)
    return ObjectId(value)


async def _questions_in_order(db, question_ids):
    object_ids = to_object_ids(question_ids, "question id")
    questions = await db.Questions.find({"_id": {"$in": object_ids}}).to_list(None)
    by_id = {str(q["_id"]): q for q in questions}
    return [by_id[str(qid)] for qid in question_ids if str(qid) in by_id]


@router.post("/question-sets")
async def create_question_set(data: QuestionSetCreate, db=Depends(get_db)):
    if not data.label.strip() or not data.questions:
        raise HTTPException(status_code=400, detail="Invalid question set data")

    # a question fills at most one slot
    question_ids = list(dict.fromkeys(str(q) for q in data.questions))
    if data.format == "dps":
        selected = await _questions_in_order(db, question_ids)
        try:
            question_ids = order_dps_question_ids(selected)
        except QuestionSetLayoutError as e:
            raise HTTPException(status_code=400, detail=str(e))

    now = datetime.utcnow()
    question_set = {
        "label": data.label,
        "questions": question_ids,
        "format": data.format,
        "created_at": now,
        "updated_at": now,
    }
    try:
        result = await db.QuestionSets.insert_one(question_set)
    except Exception as e:
        logger.error(f"Error creating question set: {e}")
        raise HTTPException(status_code=500, detail="Failed to create question set")
    return {"success": True, "id": str(result.inserted_id), "message": "Question set created successfully"}


@router.get("/question-sets")
async def get_question_sets(id: Optional[str] = None, db=Depends(get_db)):
    if id:
        question_set = await db.QuestionSets.find_one({"_id": _object_id(id, "Invalid question set ID format")})
        if not question_set:
            raise HTTPException(status_code=404, detail="Question set not found")
        return stringify_ids(question_set)
    try:
        question_sets = await db.QuestionSets.find({}, sort=[("created_at", -1)]).to_list(None)
    except Exception as e:
        logger.error(f"Error fetching question sets: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch question sets")
    return stringify_ids(question_sets)


@router.post("/question-set")
async def fetch_question_set(params: QuestionSetFetch, db=Depends(get_db)):
    if not params.q:
        raise HTTPException(status_code=400, detail="Question set ID is required")
    question_set = await db.QuestionSets.find_one({"_id": _object_id(params.q, "Invalid question set ID format")})
    if not question_set:
        raise HTTPException(status_code=404, detail="Question set not found")
    try:
        questions = await _questions_in_order(db, question_set.get("questions") or [])
    except Exception as e:
        logger.error(f"Failed to fetch question set: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch question set")
    return [serialize_question(q) for q in questions]


@router.get("/question-set/{id}")
async def get_question_set(id: str, db=Depends(get_db)):
    question_set = await db.QuestionSets.find_one({"_id": _object_id(id, "Invalid question set ID format")})
    if not question_set:
        raise HTTPException(status_code=404, detail="Question set not found")

    if question_set.get("question_pdf_blob"):
        return stringify_ids(question_set)

    if not isinstance(question_set.get("questions"), list):
        raise HTTPException(status_code=400, detail="Invalid question set format")
    questions = await _questions_in_order(db, question_set["questions"])
    return {
        "questions": [serialize_question(q) for q in questions],
        "label": question_set.get("label") or "Unknown Set",
    }


@router.delete("/question-set/{id}")
async def delete_question_set(id: str, db=Depends(get_db)):
    logger.info(f"Received DELETE request for question set ID: {id}")
    result = await db.QuestionSets.delete_one({"_id": _object_id(id, "Invalid question set ID format")})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Question set not found")
    return {"success": True, "message": "Question set deleted successfully"}


@router.post("/pdf-question-sets")
async def get_pdf_question_sets(lookup: PdfQuestionSetLookup, db=Depends(get_db)):
    if not lookup.ids:
        raise HTTPException(status_code=400, detail="No valid IDs provided")
    object_ids = to_object_ids(lookup.ids, "question set id")
    if not object_ids:
        return []
    try:
        pdf_sets = await db.QuestionSets.find(
            {"_id": {"$in": object_ids}, "question_pdf_blob": {"$exists": True}},
            PDF_SET_PROJECTION,
        ).to_list(None)
    except Exception as e:
        logger.error(f"Error fetching PDF question sets: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return stringify_ids(pdf_sets)
