"""
Usage tracking API routes
"""

from fastapi import APIRouter, HTTPException, Depends, Request

from tutor.exceptions import TutorError
from tutor.models.usage import (
    ActionCheck,
    RecordUsageRequest,
    UpgradeRequest,
    UsageStats,
    UserUsage,
)
from tutor.services.usage_tracking_service import UsageTrackingService

# Create router
router = APIRouter()


def get_usage_service(request: Request) -> UsageTrackingService:
    return request.app.state.usage_service


@router.get("/{user_id}", response_model=UsageStats)
def get_usage_stats(
    user_id: str, service: UsageTrackingService = Depends(get_usage_service)
):
    """Get a user's usage against their tier limits"""
    return service.get_usage_stats(user_id)


@router.get("/{user_id}/can/{action}", response_model=ActionCheck)
def can_perform_action(
    user_id: str,
    action: str,
    service: UsageTrackingService = Depends(get_usage_service),
):
    """Check whether a user may perform an action"""
    try:
        return service.can_perform_action(user_id, action)
    except TutorError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{user_id}/record", response_model=UserUsage)
def record_usage(
    user_id: str,
    body: RecordUsageRequest,
    service: UsageTrackingService = Depends(get_usage_service),
):
    """Count one use of an action"""
    return service.record_usage(user_id, body.action)


@router.post("/{user_id}/upgrade", response_model=UserUsage)
def upgrade_user(
    user_id: str,
    body: UpgradeRequest,
    service: UsageTrackingService = Depends(get_usage_service),
):
    """Change a user's subscription tier"""
    return service.upgrade_user(user_id, body.tier)
