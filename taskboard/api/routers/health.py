import logging
import sqlite3

from fastapi import APIRouter, Depends

from taskboard.db_models import TaskboardDB
from taskboard.dependencies import get_db
from taskboard.errors import InternalError


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=dict)
def health(db: TaskboardDB = Depends(get_db)):
    """Check that the database answers; does not require authentication."""
    try:
        db.ping()
    except sqlite3.Error:
        logger.exception("Database health check failed")
        raise InternalError("Database unavailable")
    return {"status": "ok"}
