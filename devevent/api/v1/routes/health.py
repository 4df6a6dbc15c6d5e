from fastapi import APIRouter
from typing import Dict
from devevent.core.errors import DatabaseUnavailableError
from devevent.db.session import db_manager

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=Dict[str, str])
async def health_check():
    """
    Health check that also reports whether the database is reachable.

    Returns:
        Dict with service status and database state
    """
    try:
        await db_manager.connect()
    except DatabaseUnavailableError:
        return {"status": "degraded", "database": "unavailable"}
    return {"status": "healthy", "database": "connected"}
