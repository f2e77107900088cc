# routes/subscription.py
from fastapi import APIRouter, Depends

from database import get_db
from models.quiz_type import get_quiz_config, parse_quiz_type
from .access_gate import check_access, get_user_tier
from .auth import ensure_same_user, get_current_user
from .usage_ledger import get_usage

router = APIRouter(prefix="/api/subscription", tags=["subscription"])


@router.get("/check-access")
async def read_access(userId: str, quizType: str, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    ensure_same_user(current_user, userId)
    has_access = await check_access(db, userId, quizType)
    quiz_type = parse_quiz_type(quizType)
    return {
        "userId": userId,
        "quizType": quizType,
        "hasAccess": has_access,
        "timeLimit": get_quiz_config(quiz_type).time_limit if quiz_type else None,
    }


@router.get("/tier")
async def read_tier(userId: str, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    ensure_same_user(current_user, userId)
    return {"userId": userId, "tier": await get_user_tier(db, userId)}


@router.get("/usage")
async def read_usage(userId: str, db=Depends(get_db), current_user: dict = Depends(get_current_user)):
    ensure_same_user(current_user, userId)
    return await get_usage(db, userId)
