"""
Achievement table and unlock rules
"""

from typing import List, Tuple

from ..models.progress import (
    AchievementCategory,
    AchievementDefinition,
    Rarity,
    StudentProgress,
    StreakRequirement,
    AccuracyRequirement,
    QuestionCountRequirement,
    TimeWindowRequirement,
    TopicMasteryRequirement,
)


DEFAULT_ACHIEVEMENTS: Tuple[AchievementDefinition, ...] = (
    # Streak
    AchievementDefinition(
        id="first_streak",
        title="Getting Started",
        description="Answer 3 questions in a row correctly",
        icon="🔥",
        category=AchievementCategory.STREAK,
        requirement=StreakRequirement(threshold=3),
        points=50,
        rarity=Rarity.COMMON,
    ),
    AchievementDefinition(
        id="fire_streak",
        title="On Fire!",
        description="Maintain a 10-question streak",
        icon="🔥",
        category=AchievementCategory.STREAK,
        requirement=StreakRequirement(threshold=10),
        points=200,
        rarity=Rarity.RARE,
    ),
    AchievementDefinition(
        id="unstoppable",
        title="Unstoppable",
        description="Achieve a 25-question streak",
        icon="⚡",
        category=AchievementCategory.STREAK,
        requirement=StreakRequirement(threshold=25),
        points=500,
        rarity=Rarity.EPIC,
    ),
    # Accuracy
    AchievementDefinition(
        id="sharp_shooter",
        title="Sharp Shooter",
        description="Maintain 90% accuracy over 20 questions",
        icon="🎯",
        category=AchievementCategory.ACCURACY,
        requirement=AccuracyRequirement(threshold=90, min_questions=20),
        points=300,
        rarity=Rarity.RARE,
    ),
    AchievementDefinition(
        id="perfectionist",
        title="Perfectionist",
        description="Achieve 100% accuracy on 10 questions",
        icon="💎",
        category=AchievementCategory.ACCURACY,
        requirement=AccuracyRequirement(threshold=100, min_questions=10),
        points=750,
        rarity=Rarity.LEGENDARY,
    ),
    # Volume
    AchievementDefinition(
        id="century",
        title="Century",
        description="Answer 100 questions",
        icon="💯",
        category=AchievementCategory.STREAK,
        requirement=QuestionCountRequirement(threshold=100),
        points=400,
        rarity=Rarity.EPIC,
    ),
    AchievementDefinition(
        id="marathon",
        title="Marathon Runner",
        description="Answer 500 questions",
        icon="🏃",
        category=AchievementCategory.STREAK,
        requirement=QuestionCountRequirement(threshold=500),
        points=1000,
        rarity=Rarity.LEGENDARY,
    ),
    # Subject mastery
    AchievementDefinition(
        id="physics_master",
        title="Physics Master",
        description="Achieve 85% mastery in Physics",
        icon="⚛️",
        category=AchievementCategory.TOPIC,
        requirement=TopicMasteryRequirement(threshold=85, subject="Physics"),
        points=600,
        rarity=Rarity.EPIC,
    ),
    AchievementDefinition(
        id="chemistry_wizard",
        title="Chemistry Wizard",
        description="Achieve 85% mastery in Chemistry",
        icon="🧪",
        category=AchievementCategory.TOPIC,
        requirement=TopicMasteryRequirement(threshold=85, subject="Chemistry"),
        points=600,
        rarity=Rarity.EPIC,
    ),
    AchievementDefinition(
        id="bio_expert",
        title="Biology Expert",
        description="Achieve 85% mastery in Biology",
        icon="🧬",
        category=AchievementCategory.TOPIC,
        requirement=TopicMasteryRequirement(threshold=85, subject="Biology"),
        points=600,
        rarity=Rarity.EPIC,
    ),
    AchievementDefinition(
        id="math_genius",
        title="Math Genius",
        description="Achieve 85% mastery in Mathematics",
        icon="📐",
        category=AchievementCategory.TOPIC,
        requirement=TopicMasteryRequirement(threshold=85, subject="Mathematics"),
        points=600,
        rarity=Rarity.EPIC,
    ),
    # Speed
    AchievementDefinition(
        id="speed_demon",
        title="Speed Demon",
        description="Answer 10 questions in under 5 minutes",
        icon="⚡",
        category=AchievementCategory.SPEED,
        requirement=TimeWindowRequirement(threshold_seconds=300, questions=10),
        points=250,
        rarity=Rarity.RARE,
    ),
    # Special
    AchievementDefinition(
        id="daily_warrior",
        title="Daily Warrior",
        description="Complete daily challenges for 7 days straight",
        icon="🗓️",
        category=AchievementCategory.SPECIAL,
        requirement=StreakRequirement(threshold=7),
        points=400,
        rarity=Rarity.EPIC,
    ),
    AchievementDefinition(
        id="jee_champion",
        title="JEE Champion",
        description="Hold 90%+ accuracy across a full 75-question JEE paper",
        icon="🏆",
        category=AchievementCategory.SPECIAL,
        requirement=AccuracyRequirement(threshold=90, min_questions=75),
        points=1000,
        rarity=Rarity.LEGENDARY,
    ),
)


def answer_window_size(achievements) -> int:
    """Number of recent answer durations needed to evaluate every time window"""
    windows = [
        a.requirement.questions
        for a in achievements
        if isinstance(a.requirement, TimeWindowRequirement)
    ]
    return max(windows, default=0)


def is_unlocked(achievement: AchievementDefinition, progress: StudentProgress) -> bool:
    """Check whether the student's current stats satisfy an achievement"""
    requirement = achievement.requirement

    if isinstance(requirement, StreakRequirement):
        return progress.current_streak >= requirement.threshold
    if isinstance(requirement, AccuracyRequirement):
        return (
            progress.questions_answered >= requirement.min_questions
            and progress.average_accuracy >= requirement.threshold
        )
    if isinstance(requirement, QuestionCountRequirement):
        return progress.questions_answered >= requirement.threshold
    if isinstance(requirement, TimeWindowRequirement):
        window = progress.recent_answer_seconds[-requirement.questions :]
        return (
            len(window) == requirement.questions
            and sum(window) <= requirement.threshold_seconds
        )
    if isinstance(requirement, TopicMasteryRequirement):
        mastery = progress.subject_mastery.get(requirement.subject, 0)
        return mastery >= requirement.threshold
    raise TypeError(f"Unsupported requirement kind: {requirement.kind}")


def pending_unlocks(
    achievements, progress: StudentProgress
) -> List[AchievementDefinition]:
    """Achievements the student satisfies but has not unlocked yet, in table order"""
    return [
        a
        for a in achievements
        if not progress.has_achievement(a.id) and is_unlocked(a, progress)
    ]
