"""
Navigation items gated by the entitlement check
"""

from typing import List, Optional, Protocol

from pydantic import BaseModel

from ..models.usage import ActionCheck, UsageAction


class EntitlementChecker(Protocol):
    def can_perform_action(self, user_id: str, action) -> ActionCheck: ...


class NavItem(BaseModel):
    id: str
    name: str
    description: str
    feature: Optional[UsageAction] = None


class NavEntry(NavItem):
    locked: bool = False
    reason: Optional[str] = None


NAV_ITEMS = (
    NavItem(id="chat", name="AI Tutor", description="Chat with AI"),
    NavItem(
        id="learning-path", name="Learning Path", description="AI Recommendations"
    ),
    NavItem(
        id="study-planner",
        name="Study Planner",
        description="Plan & Schedule",
        feature=UsageAction.STUDY_PLANNER,
    ),
    NavItem(
        id="analytics",
        name="Analytics",
        description="Track Progress",
        feature=UsageAction.ANALYTICS,
    ),
    NavItem(
        id="mock-exams",
        name="Mock Exams",
        description="Practice Tests",
        feature=UsageAction.MOCK_TEST,
    ),
)


def build_navigation(user_id: str, checker: EntitlementChecker) -> List[NavEntry]:
    """Navigation items for a user, with gated pages locked when not allowed"""
    entries = []
    for item in NAV_ITEMS:
        entry = NavEntry(**item.model_dump())
        if item.feature is not None:
            check = checker.can_perform_action(user_id, item.feature)
            entry.locked = not check.allowed
            entry.reason = check.reason
        entries.append(entry)
    return entries
