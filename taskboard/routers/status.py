import platform
import time

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..config import DATABASE_URL
from ..database import check_connection, get_db
from ..models.columns import utcnow

router = APIRouter()

_started_at = time.monotonic()


@router.get("/status")
def api_status():
    """Basic liveness information about the API process."""
    return {
        "status": "online",
        "timestamp": utcnow().isoformat(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "version": platform.python_version(),
        "platform": platform.system().lower(),
    }


@router.get("/database")
def database_status(db: Session = Depends(get_db)):
    """Report whether the configured database answers a trivial query."""
    return {
        "backend": DATABASE_URL.split(":", 1)[0],
        "isConnected": check_connection(db),
        "timestamp": utcnow().isoformat(),
    }
