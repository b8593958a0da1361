# routes/auth.py
from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from bson import ObjectId
from typing import Optional
import logging

from config import JWT_SECRET, JWT_ALGORITHM
from database import get_db
from models.user import PRIVATE_USER_FIELDS

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_user_by_id(db, user_id: str):
    if not ObjectId.is_valid(user_id):
        logger.warning(f"Invalid user id in token: {user_id}")
        return None
    user = await db.Users.find_one({"_id": ObjectId(user_id)}, PRIVATE_USER_FIELDS)
    if not user:
        logger.warning(f"User not found for id: {user_id}")
    return user


async def get_current_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    db=Depends(get_db),
):
    token = request.cookies.get("token") or bearer
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.error(f"JWTError: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("userId")
    if not user_id:
        logger.error("Invalid token: Missing userId")
        raise HTTPException(status_code=401, detail="Invalid token")
    user = await get_user_by_id(db, str(user_id))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def require_user_type(user: dict, *types: str, detail: str = "Unauthorized access"):
    if user.get("type") not in types:
        raise HTTPException(status_code=403, detail=detail)
