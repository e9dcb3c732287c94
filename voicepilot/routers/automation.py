"""
Automation Router - statistics and tracked windows.

Endpoints:
    GET    /automation/stats           → StatisticsSnapshot
    GET    /automation/windows         → open tracked windows
    DELETE /automation/windows/{id}    → close one window (404 if unknown)
    DELETE /automation/windows         → close all, returns the count
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from voicepilot.deps import AutomationContainer, get_container
from voicepilot.services.statistics import StatisticsSnapshot

logger = logging.getLogger("voicepilot.routers.automation")

router = APIRouter(prefix="/automation", tags=["automation"])


class WindowResponse(BaseModel):
    id: str
    type: str
    query: Optional[str] = None
    platform: Optional[str] = None
    opened_at: str
    last_activity: str
    is_active: bool
    focused: bool
    minimized: bool
    current: bool = False


class WindowListResponse(BaseModel):
    windows: List[WindowResponse]
    active_id: Optional[str] = None
    total: int


class CloseAllResponse(BaseModel):
    closed: int


@router.get("/stats", response_model=StatisticsSnapshot)
def get_automation_stats(container: AutomationContainer = Depends(get_container)):
    return container.statistics.snapshot()


@router.get("/windows", response_model=WindowListResponse)
def list_windows(container: AutomationContainer = Depends(get_container)):
    """List tracked windows. Windows that closed on their own are dropped first."""
    open_windows = container.registry.get_open()
    active = container.registry.get_active()
    active_id = active.id if active else None

    windows = [
        WindowResponse(**window.to_dict(), current=(window_id == active_id))
        for window_id, window in open_windows
    ]
    return WindowListResponse(windows=windows, active_id=active_id, total=len(windows))


@router.delete("/windows/{window_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_window(window_id: str, container: AutomationContainer = Depends(get_container)):
    closed = await container.registry.close(window_id)
    if not closed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No open window with id {window_id}",
        )


@router.delete("/windows", response_model=CloseAllResponse)
async def close_all_windows(container: AutomationContainer = Depends(get_container)):
    count = await container.registry.close_all()
    return CloseAllResponse(closed=count)
