"""
Usage tracking and entitlement checks for free and paid tiers
"""

import threading
import logging
from datetime import datetime, UTC
from typing import Callable, Optional

from ..database.usage import UsageStore
from ..exceptions import UnknownActionError
from ..models.usage import (
    UNLIMITED,
    ActionCheck,
    SubscriptionTier,
    UsageAction,
    UsageQuota,
    UsageStats,
    UsedAndLimit,
    UserUsage,
)

logger = logging.getLogger(__name__)


TIER_QUOTAS = {
    SubscriptionTier.FREE: UsageQuota(
        questions_per_day=5,
        questions_per_month=100,
        file_uploads_per_day=3,
        mock_tests_per_month=2,
        study_planner_access=True,
        analytics_access=True,
        priority_support=False,
    ),
    SubscriptionTier.PREMIUM: UsageQuota(
        questions_per_day=100,
        questions_per_month=1000,
        file_uploads_per_day=20,
        mock_tests_per_month=20,
        study_planner_access=True,
        analytics_access=True,
        priority_support=True,
    ),
    SubscriptionTier.INSTITUTE: UsageQuota(
        questions_per_day=UNLIMITED,
        questions_per_month=UNLIMITED,
        file_uploads_per_day=UNLIMITED,
        mock_tests_per_month=UNLIMITED,
        study_planner_access=True,
        analytics_access=True,
        priority_support=True,
    ),
}


def _limit_reached(used: int, limit: int) -> bool:
    return limit != UNLIMITED and used >= limit


def _deny(reason: str) -> ActionCheck:
    return ActionCheck(allowed=False, reason=reason, upgrade_required=True)


def _as_action(action) -> UsageAction:
    try:
        return UsageAction(action)
    except ValueError:
        raise UnknownActionError(f"Unknown usage action: {action!r}")


class UsageTrackingService:
    def __init__(
        self, store: UsageStore, clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.clock = clock or (lambda: datetime.now(UTC))
        self._lock = threading.Lock()

    def get_quota_for_tier(self, tier) -> UsageQuota:
        """Quota table entry for a tier"""
        return TIER_QUOTAS[SubscriptionTier(tier)]

    def initialize_user(
        self, user_id: str, tier: SubscriptionTier = SubscriptionTier.FREE
    ) -> UserUsage:
        """Start tracking a user with zeroed counters"""
        with self._lock:
            return self._initialize_user(user_id, tier)

    def get_user_usage(self, user_id: str) -> UserUsage:
        with self._lock:
            return self._get_user_usage(user_id)

    # Callers of the two helpers below must hold _lock

    def _initialize_user(self, user_id: str, tier: SubscriptionTier) -> UserUsage:
        usage = UserUsage(
            user_id=user_id,
            last_reset_date=self.clock(),
            subscription_tier=tier,
        )
        self.store.put(usage)
        return usage

    def _get_user_usage(self, user_id: str) -> UserUsage:
        usage = self.store.get(user_id)
        if usage is None:
            return self._initialize_user(user_id, SubscriptionTier.FREE)
        return usage

    def _reset_counters_if_needed(self, usage: UserUsage) -> None:
        """Reset daily counters on a new day and monthly counters on a new month"""
        now = self.clock()
        last_reset = usage.last_reset_date

        if now.date() != last_reset.date():
            usage.questions_today = 0
            usage.file_uploads_today = 0

        if (now.year, now.month) != (last_reset.year, last_reset.month):
            usage.questions_this_month = 0
            usage.mock_tests_this_month = 0

        usage.last_reset_date = now

    def can_perform_action(self, user_id: str, action) -> ActionCheck:
        """Check whether the user's tier and usage allow an action"""
        action = _as_action(action)

        with self._lock:
            usage = self._get_user_usage(user_id)
            self._reset_counters_if_needed(usage)
            self.store.put(usage)

        quota = self.get_quota_for_tier(usage.subscription_tier)
        check = self._check(action, usage, quota)
        if not check.allowed:
            logger.info(f"Denied {action.value} for {user_id}: {check.reason}")
        return check

    def _check(
        self, action: UsageAction, usage: UserUsage, quota: UsageQuota
    ) -> ActionCheck:
        if action == UsageAction.QUESTION:
            if _limit_reached(usage.questions_today, quota.questions_per_day):
                return _deny(
                    f"Daily question limit reached ({quota.questions_per_day}). "
                    "Upgrade for unlimited questions!"
                )
            if _limit_reached(usage.questions_this_month, quota.questions_per_month):
                return _deny(
                    f"Monthly question limit reached ({quota.questions_per_month}). "
                    "Upgrade for more questions!"
                )
        elif action == UsageAction.FILE_UPLOAD:
            if _limit_reached(usage.file_uploads_today, quota.file_uploads_per_day):
                return _deny(
                    f"Daily file upload limit reached ({quota.file_uploads_per_day}). "
                    "Upgrade for more uploads!"
                )
        elif action == UsageAction.MOCK_TEST:
            if _limit_reached(usage.mock_tests_this_month, quota.mock_tests_per_month):
                return _deny(
                    f"Monthly mock test limit reached ({quota.mock_tests_per_month}). "
                    "Upgrade for unlimited tests!"
                )
        elif action == UsageAction.STUDY_PLANNER:
            if not quota.study_planner_access:
                return _deny(
                    "Study Planner is a premium feature. "
                    "Upgrade to access personalized study plans!"
                )
        elif action == UsageAction.ANALYTICS:
            if not quota.analytics_access:
                return _deny(
                    "Advanced Analytics is a premium feature. "
                    "Upgrade to track your progress!"
                )
        return ActionCheck(allowed=True)

    def record_usage(self, user_id: str, action) -> UserUsage:
        """Count one use of a metered action"""
        action = _as_action(action)

        with self._lock:
            usage = self._get_user_usage(user_id)
            self._reset_counters_if_needed(usage)

            if action == UsageAction.QUESTION:
                usage.questions_today += 1
                usage.questions_this_month += 1
            elif action == UsageAction.FILE_UPLOAD:
                usage.file_uploads_today += 1
            elif action == UsageAction.MOCK_TEST:
                usage.mock_tests_this_month += 1

            self.store.put(usage)
        return usage

    def get_usage_stats(self, user_id: str) -> UsageStats:
        with self._lock:
            usage = self._get_user_usage(user_id)
        quota = self.get_quota_for_tier(usage.subscription_tier)

        return UsageStats(
            questions_used=UsedAndLimit(
                today=usage.questions_today, month=usage.questions_this_month
            ),
            questions_limit=UsedAndLimit(
                today=quota.questions_per_day, month=quota.questions_per_month
            ),
            file_uploads_used=usage.file_uploads_today,
            file_uploads_limit=quota.file_uploads_per_day,
            mock_tests_used=usage.mock_tests_this_month,
            mock_tests_limit=quota.mock_tests_per_month,
            tier=usage.subscription_tier,
            upgrade_available=usage.subscription_tier == SubscriptionTier.FREE,
        )

    def upgrade_user(self, user_id: str, tier) -> UserUsage:
        tier = SubscriptionTier(tier)
        with self._lock:
            usage = self._get_user_usage(user_id)
            usage.subscription_tier = tier
            self.store.put(usage)
        logger.info(f"User {user_id} moved to {tier.value} tier")
        return usage
