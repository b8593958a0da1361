# routes/rooms.py
from fastapi import APIRouter, Depends, HTTPException
from bson import ObjectId
from datetime import datetime
import logging

from database import get_db, to_object_ids, stringify_ids
from models.room import RoomCreate, RoomQuestionSet
from models.user import PRIVATE_USER_FIELDS
from routes.auth import get_current_user, require_user_type
from services.room_stats import question_set_performance, student_question_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rooms", tags=["rooms"])


def _room_id(room_id: str) -> ObjectId:
    if not ObjectId.is_valid(room_id):
        logger.error(f"Invalid room ID: {room_id}")
        raise HTTPException(status_code=400, detail="Invalid room ID format")
    return ObjectId(room_id)


async def _get_room(db, room_id: str) -> dict:
    room = await db.Rooms.find_one({"_id": _room_id(room_id)})
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


@router.post("/")
async def create_room(room: RoomCreate, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    require_user_type(current_user, "teacher", detail="Only teachers can create rooms")
    now = datetime.utcnow()
    room_dict = {
        "name": room.name,
        "teachers": [current_user["_id"]],
        "students": to_object_ids(room.students, "student id"),
        "question_sets": to_object_ids(room.question_sets, "question set id"),
        "created_at": now,
        "updated_at": now,
    }
    result = await db.Rooms.insert_one(room_dict)
    return {"success": True, "id": str(result.inserted_id)}


@router.get("/{id}")
async def get_room(id: str, db=Depends(get_db)):
    room = await _get_room(db, id)
    try:
        students = await db.Users.find(
            {"_id": {"$in": to_object_ids(room.get("students") or [], "student id")}},
            PRIVATE_USER_FIELDS,
        ).to_list(None)
    except Exception as e:
        logger.error(f"Error fetching room data: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    room["students"] = [{**student, **student_question_stats(student)} for student in students]
    return {"room": stringify_ids(room)}


@router.post("/{id}/question-sets")
async def assign_question_set(id: str, assignment: RoomQuestionSet, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    require_user_type(current_user, "teacher", detail="Only teachers can assign question sets")
    if not ObjectId.is_valid(assignment.questionSetId):
        raise HTTPException(status_code=400, detail="Invalid question set ID format")
    set_id = ObjectId(assignment.questionSetId)
    if not await db.QuestionSets.find_one({"_id": set_id}):
        raise HTTPException(status_code=404, detail="Question set not found")
    result = await db.Rooms.update_one(
        {"_id": _room_id(id)},
        {"$addToSet": {"question_sets": set_id}, "$set": {"updated_at": datetime.utcnow()}},
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Room not found")
    return {"success": True, "message": "Question set assigned to room"}


@router.delete("/{id}/question-sets/{set_id}")
async def remove_question_set(id: str, set_id: str, db=Depends(get_db)):
    if not ObjectId.is_valid(set_id):
        raise HTTPException(status_code=400, detail="Invalid question set ID format")
    room_oid = _room_id(id)
    room = await db.Rooms.find_one({"_id": room_oid})
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    if ObjectId(set_id) not in (room.get("question_sets") or []):
        raise HTTPException(status_code=404, detail="Question set was not found in this room")
    await db.Rooms.update_one(
        {"_id": room_oid},
        {"$pull": {"question_sets": ObjectId(set_id)}, "$set": {"updated_at": datetime.utcnow()}},
    )
    return {"success": True, "message": "Question set removed from room successfully"}


@router.get("/{id}/question-sets-performance")
async def get_question_sets_performance(id: str, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    room = await _get_room(db, id)
    try:
        students = await db.Users.find(
            {"_id": {"$in": to_object_ids(room.get("students") or [], "student id")}},
            {"_id": 1, "question_sets_tracking": 1},
        ).to_list(None)
        question_sets = await db.QuestionSets.find(
            {"_id": {"$in": to_object_ids(room.get("question_sets") or [], "question set id")}}
        ).to_list(None)
    except Exception as e:
        logger.error(f"Error fetching question set performance: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"questionSets": [question_set_performance(qs, students) for qs in question_sets]}
