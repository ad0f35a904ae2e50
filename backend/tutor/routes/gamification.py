"""
Leaderboard and achievement catalogue routes

Mounted apart from the per-student progress routes so that no student id can
collide with these paths.
"""

from fastapi import APIRouter, Depends, Query, Request
from typing import List, Optional

from tutor.models.progress import AchievementDefinition, LeaderboardEntry
from tutor.routes.progress import get_progress_engine
from tutor.services.progress_engine import ProgressEngine

router = APIRouter()


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
def get_leaderboard(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=100),
    engine: ProgressEngine = Depends(get_progress_engine),
):
    """Get the top students by total points"""
    if limit is None:
        limit = request.app.state.settings.leaderboard_limit
    return engine.get_leaderboard(limit)


@router.get("/achievements", response_model=List[AchievementDefinition])
def get_achievements(engine: ProgressEngine = Depends(get_progress_engine)):
    """Get every achievement a student can unlock"""
    return list(engine.achievements)
