# routes/filters.py
from fastapi import APIRouter, Depends, HTTPException
import logging

from database import get_db, stringify_ids

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/filters", tags=["filters"])


@router.get("/")
async def get_filters(db=Depends(get_db)):
    try:
        filters = await db.Filters.find({}).to_list(None)
    except Exception as e:
        logger.error(f"Failed to fetch filters: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch filters")
    return stringify_ids(filters)
