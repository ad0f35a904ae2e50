from .progress import (
    Difficulty,
    AchievementCategory,
    Rarity,
    StreakRequirement,
    AccuracyRequirement,
    QuestionCountRequirement,
    TimeWindowRequirement,
    TopicMasteryRequirement,
    AchievementDefinition,
    UnlockedAchievement,
    DailyChallenge,
    DailyChallengeCreate,
    StudentProgress,
    AnswerCreate,
    AnswerOutcome,
    LeaderboardEntry,
)
from .usage import (
    SubscriptionTier,
    UsageAction,
    UsageQuota,
    UserUsage,
    ActionCheck,
    UsageStats,
)


__all__ = [
    "Difficulty",
    "AchievementCategory",
    "Rarity",
    "StreakRequirement",
    "AccuracyRequirement",
    "QuestionCountRequirement",
    "TimeWindowRequirement",
    "TopicMasteryRequirement",
    "AchievementDefinition",
    "UnlockedAchievement",
    "DailyChallenge",
    "DailyChallengeCreate",
    "StudentProgress",
    "AnswerCreate",
    "AnswerOutcome",
    "LeaderboardEntry",
    "SubscriptionTier",
    "UsageAction",
    "UsageQuota",
    "UserUsage",
    "ActionCheck",
    "UsageStats",
]
