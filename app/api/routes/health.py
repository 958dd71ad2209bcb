import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from fastapi.responses import JSONResponse
from app.api.deps import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

@router.get("/health")
def health(db: Session=Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return JSONResponse(status_code=503, content={"message": "Database unavailable"})
    return {"status": "ok", "database": "ok"}
