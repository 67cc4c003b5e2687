from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from sleep_tracker.database.connection import get_db

router = APIRouter(tags=["Health"])


@router.get("/up")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Liveness probe that also checks the database connection."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
