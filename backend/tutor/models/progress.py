"""
Progress and gamification models for the tutor backend
"""

from pydantic import BaseModel, Field, computed_field
from typing import Optional, List, Dict, Union, Literal, Annotated
from datetime import datetime, date
from enum import Enum


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class AchievementCategory(str, Enum):
    STREAK = "streak"
    ACCURACY = "accuracy"
    SPEED = "speed"
    TOPIC = "topic"
    SPECIAL = "special"


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class StreakRequirement(BaseModel):
    kind: Literal["streak"] = "streak"
    threshold: int = Field(..., ge=1, description="Consecutive correct answers")


class AccuracyRequirement(BaseModel):
    kind: Literal["accuracy"] = "accuracy"
    threshold: int = Field(..., ge=0, le=100, description="Minimum average accuracy")
    min_questions: int = Field(
        0, ge=0, description="Questions answered before accuracy counts"
    )


class QuestionCountRequirement(BaseModel):
    kind: Literal["question_count"] = "question_count"
    threshold: int = Field(..., ge=1, description="Questions answered")


class TimeWindowRequirement(BaseModel):
    kind: Literal["time_window"] = "time_window"
    threshold_seconds: float = Field(..., gt=0)
    questions: int = Field(10, ge=1, description="Size of the answer window")


class TopicMasteryRequirement(BaseModel):
    kind: Literal["topic_mastery"] = "topic_mastery"
    threshold: float = Field(..., ge=0, le=100)
    subject: str


Requirement = Annotated[
    Union[
        StreakRequirement,
        AccuracyRequirement,
        QuestionCountRequirement,
        TimeWindowRequirement,
        TopicMasteryRequirement,
    ],
    Field(discriminator="kind"),
]


class AchievementDefinition(BaseModel):
    id: str = Field(..., description="Unique achievement key")
    title: str
    description: str
    icon: str
    category: AchievementCategory
    requirement: Requirement
    points: int = Field(..., ge=0, description="Reward points granted on unlock")
    rarity: Rarity

    class Config:
        frozen = True


class UnlockedAchievement(AchievementDefinition):
    unlocked_at: datetime = Field(..., description="When the achievement was unlocked")


class DailyChallenge(BaseModel):
    id: str = Field(..., description="daily-{date}-{subject}")
    date: date
    subject: str
    question_id: str
    bonus_points: int = Field(100, ge=0)
    completed: bool = False
    completed_at: Optional[datetime] = None


DEFAULT_SUBJECTS = ("Physics", "Chemistry", "Biology", "Mathematics")


class StudentProgress(BaseModel):
    student_id: str
    level: int = 1
    total_points: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    questions_answered: int = 0
    average_accuracy: int = Field(0, ge=0, le=100)
    time_spent_seconds: float = 0
    recent_answer_seconds: List[float] = Field(default_factory=list)
    achievements: List[UnlockedAchievement] = Field(default_factory=list)
    daily_challenges: List[DailyChallenge] = Field(default_factory=list)
    subject_mastery: Dict[str, float] = Field(
        default_factory=lambda: {subject: 0.0 for subject in DEFAULT_SUBJECTS}
    )

    @computed_field
    @property
    def time_spent(self) -> int:
        """Accumulated answering time in whole minutes"""
        return int(self.time_spent_seconds // 60)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id for a in self.achievements)

    def find_challenge(self, challenge_id: str) -> Optional[DailyChallenge]:
        return next((c for c in self.daily_challenges if c.id == challenge_id), None)


class AnswerCreate(BaseModel):
    subject: str = Field(..., min_length=1, description="Subject of the question")
    was_correct: bool
    time_spent_seconds: float = Field(..., ge=0, description="Time taken to answer")
    difficulty: Difficulty


class AnswerOutcome(BaseModel):
    new_achievements: List[UnlockedAchievement] = Field(default_factory=list)
    level_up: bool = False


class DailyChallengeCreate(BaseModel):
    subject: str = Field(..., min_length=1)
    challenge_date: Optional[date] = Field(
        None, description="Calendar day of the challenge, defaults to today"
    )


class LeaderboardEntry(BaseModel):
    student_id: str
    level: int
    total_points: int
    average_accuracy: int
    current_streak: int
