# database.py
import logging
from typing import Any, Iterable, List

from bson import ObjectId
from fastapi import FastAPI, Request
from motor.motor_asyncio import AsyncIOMotorClient

from config import MONGODB_URI, MONGODB_DB

logger = logging.getLogger(__name__)


async def init_db(db):
    await db.Questions.create_index([("education_board", 1), ("class", 1), ("subject", 1)])
    await db.Questions.create_index("topic")
    await db.Users.create_index("email_address", unique=True, sparse=True)
    await db.Rooms.create_index("teachers")
    await db.Rooms.create_index("students")


async def connect(app: FastAPI):
    logger.info(f"Connecting to MongoDB database {MONGODB_DB}")
    app.state.mongo_client = AsyncIOMotorClient(MONGODB_URI)
    app.state.db = app.state.mongo_client[MONGODB_DB]
    await init_db(app.state.db)


async def close(app: FastAPI):
    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        client.close()
        app.state.mongo_client = None
        logger.info("MongoDB connection closed")


def get_db(request: Request):
    return request.app.state.db


def to_object_ids(ids: Iterable[Any], label: str = "id") -> List[ObjectId]:
    """Convert ids to ObjectIds, dropping (and logging) the ones that are not valid."""
    object_ids = []
    for value in ids:
        if isinstance(value, ObjectId):
            object_ids.append(value)
        elif ObjectId.is_valid(str(value)):
            object_ids.append(ObjectId(str(value)))
        else:
            logger.warning(f"Invalid {label}: {value}")
    return object_ids


def stringify_ids(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: stringify_ids(v) for k, v in value.items()}
    if isinstance(value, list):
        return [stringify_ids(v) for v in value]
    return value
