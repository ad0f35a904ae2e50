"""
Navigation API routes
"""

from fastapi import APIRouter, Depends
from typing import List

from tutor.routes.usage import get_usage_service
from tutor.services.navigation import NavEntry, build_navigation
from tutor.services.usage_tracking_service import UsageTrackingService

router = APIRouter()


@router.get("/{user_id}", response_model=List[NavEntry])
def get_navigation(
    user_id: str, service: UsageTrackingService = Depends(get_usage_service)
):
    """Get navigation items with gated pages locked for this user"""
    return build_navigation(user_id, service)
