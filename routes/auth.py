# routes/auth.py
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
import logging

from config import JWT_SECRET, JWT_ALGORITHM

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.error(f"JWTError: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub") or payload.get("id")
    if not user_id:
        logger.error("Invalid token: missing subject")
        raise HTTPException(status_code=401, detail="Invalid token")
    return {"id": user_id}


def ensure_same_user(current_user: dict, user_id: str):
    if current_user["id"] != user_id:
        logger.warning(f"User {current_user['id']} tried to act for {user_id}")
        raise HTTPException(status_code=403, detail="Cannot act on behalf of another user")
