# database.py
from motor.motor_asyncio import AsyncIOMotorClient
import logging

from config import MONGODB_URI, DATABASE_NAME

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(MONGODB_URI)
db = client[DATABASE_NAME]


def get_db():
    return db


async def init_db(database):
    logger.info("Creating quiz indexes")
    await database.quizSessions.create_index("id", unique=True)
    await database.quizResults.create_index("sessionId", unique=True)
    await database.userStats.create_index("userId", unique=True)
    await database.dailyUsage.create_index("id", unique=True)
    await database.quizTypeUsage.create_index("id", unique=True)
    await database.quizSubmissions.create_index("sessionId")
