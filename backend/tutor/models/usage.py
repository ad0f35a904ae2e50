"""
Usage tracking and entitlement models
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class SubscriptionTier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"
    INSTITUTE = "institute"


class UsageAction(str, Enum):
    QUESTION = "question"
    FILE_UPLOAD = "fileUpload"
    MOCK_TEST = "mockTest"
    STUDY_PLANNER = "studyPlanner"
    ANALYTICS = "analytics"


UNLIMITED = -1


class UsageQuota(BaseModel):
    questions_per_day: int
    questions_per_month: int
    file_uploads_per_day: int
    mock_tests_per_month: int
    study_planner_access: bool
    analytics_access: bool
    priority_support: bool

    class Config:
        frozen = True


class UserUsage(BaseModel):
    user_id: str
    questions_today: int = 0
    questions_this_month: int = 0
    file_uploads_today: int = 0
    mock_tests_this_month: int = 0
    last_reset_date: datetime
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE


class ActionCheck(BaseModel):
    allowed: bool
    reason: Optional[str] = None
    upgrade_required: Optional[bool] = None


class UsedAndLimit(BaseModel):
    today: int
    month: int


class UsageStats(BaseModel):
    questions_used: UsedAndLimit
    questions_limit: UsedAndLimit
    file_uploads_used: int
    file_uploads_limit: int
    mock_tests_used: int
    mock_tests_limit: int
    tier: SubscriptionTier
    upgrade_available: bool


class RecordUsageRequest(BaseModel):
    action: UsageAction


class UpgradeRequest(BaseModel):
    tier: SubscriptionTier = Field(..., description="New subscription tier")
