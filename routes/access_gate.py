# routes/access_gate.py
from datetime import datetime, timezone
import logging

from models.quiz_type import Tier, get_quiz_config, parse_quiz_type

logger = logging.getLogger(__name__)


def _as_naive_utc(value) -> datetime:
    if isinstance(value, str):
        # JS toISOString() writes a trailing Z
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


async def get_user_tier(db, user_id: str) -> str:
    """Current subscription tier of a user.

    Users without a subscription record, without a tier, or whose
    subscription has expired are on the free tier. Store errors propagate.
    """
    subscription = await db.userSubscriptions.find_one({"userId": user_id}, {"_id": 0})
    if not subscription:
        return Tier.FREE.value

    tier = subscription.get("tier") or Tier.FREE.value
    expires_at = subscription.get("expiresAt")
    if expires_at:
        expires_at = _as_naive_utc(expires_at)
        if expires_at < datetime.utcnow():
            logger.info(f"Subscription of {user_id} ({tier}) expired at {expires_at.isoformat()}")
            return Tier.FREE.value
    return tier


async def check_access(db, user_id: str, quiz_type: str) -> bool:
    quiz = parse_quiz_type(quiz_type)
    if quiz is None:
        logger.warning(f"Access denied for {user_id}: unknown quiz type {quiz_type!r}")
        return False

    try:
        tier = await get_user_tier(db, user_id)
    except Exception as e:
        logger.error(f"Tier lookup failed for {user_id}: {str(e)}")
        return False

    allowed = tier in get_quiz_config(quiz).allowed_tiers
    if not allowed:
        logger.info(f"Access denied for {user_id}: tier {tier} cannot start {quiz.value}")
    return allowed
