# routes/analytics.py
from fastapi import APIRouter, Depends, HTTPException
import logging

from database import get_db
from models.user import LoginEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

# Site-wide counters live in a single document
LOGIN_ANALYTICS_ID = "logins"


@router.post("/login")
async def record_login(event: LoginEvent, db=Depends(get_db)):
    field = f"{event.role}_logins"
    try:
        await db.Analytics.update_one({"_id": LOGIN_ANALYTICS_ID}, {"$inc": {field: 1}}, upsert=True)
    except Exception as e:
        logger.error(f"Failed to update analytics: {e}")
        raise HTTPException(status_code=500, detail="Failed to update analytics")
    return {"success": True}
