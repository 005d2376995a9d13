from fastapi import APIRouter, Depends, status

from src.app.services.session_monitor import SessionMonitor
from src.depends import get_session_monitor

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(monitor: SessionMonitor = Depends(get_session_monitor)):
    return {
        "status": "ok",
        "session_monitor": "running" if monitor and monitor.is_running else "stopped",
    }
