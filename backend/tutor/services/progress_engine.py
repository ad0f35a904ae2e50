"""
Progress Engine: points, streaks, levels, mastery, achievements and daily challenges
"""

import math
import threading
import logging
from datetime import datetime, date, UTC
from typing import Callable, Dict, List, Optional, Sequence

from ..database.progress import ProgressStore
from ..exceptions import InvalidDifficultyError
from ..models.progress import (
    AchievementDefinition,
    AnswerOutcome,
    DailyChallenge,
    Difficulty,
    LeaderboardEntry,
    StudentProgress,
    UnlockedAchievement,
)
from .achievements import DEFAULT_ACHIEVEMENTS, answer_window_size, pending_unlocks

logger = logging.getLogger(__name__)

POINTS_PER_LEVEL = 1000
MASTERY_GAIN = 5
MASTERY_PENALTY = -2
MAX_STREAK_BONUS = 50
DAILY_CHALLENGE_BONUS = 100

DIFFICULTY_MULTIPLIER = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 1.5,
    Difficulty.HARD: 2,
}

BASE_POINTS = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 30,
}


def _round_half_up(value: float) -> int:
    """Round non-negative values with .5 going up, unlike Python's round()"""
    return math.floor(value + 0.5)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def level_for_points(total_points: int) -> int:
    return total_points // POINTS_PER_LEVEL + 1


class ProgressEngine:
    """Owns every student's gamification state for the lifetime of the process"""

    def __init__(
        self,
        store: ProgressStore,
        achievements: Optional[Sequence[AchievementDefinition]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.achievements = tuple(
            DEFAULT_ACHIEVEMENTS if achievements is None else achievements
        )
        self.clock = clock or _utc_now
        self._window_size = answer_window_size(self.achievements)
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, student_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(student_id)
            if lock is None:
                lock = self._locks[student_id] = threading.Lock()
            return lock

    def _load(self, student_id: str) -> StudentProgress:
        progress = self.store.get(student_id)
        if progress is None:
            logger.debug(f"Creating progress record for student {student_id}")
            progress = StudentProgress(student_id=student_id)
            self.store.put(progress)
        return progress

    def get_or_create(self, student_id: str) -> StudentProgress:
        """Return the student's progress, creating a zeroed record on first access"""
        with self._lock_for(student_id):
            return self._load(student_id)

    def get_stats(self, student_id: str) -> StudentProgress:
        return self.get_or_create(student_id)

    def record_answer(
        self,
        student_id: str,
        subject: str,
        was_correct: bool,
        time_spent_seconds: float,
        difficulty,
    ) -> AnswerOutcome:
        """
        Apply one answered question to the student's progress

        Args:
            student_id: Student identifier
            subject: Subject of the question; unknown subjects start at zero mastery
            was_correct: Whether the answer was correct
            time_spent_seconds: Time taken to answer
            difficulty: Easy, Medium or Hard

        Returns:
            AnswerOutcome with achievements unlocked by this answer and
            whether the level went up
        """
        try:
            difficulty = Difficulty(difficulty)
        except ValueError:
            raise InvalidDifficultyError(f"Unknown difficulty: {difficulty!r}")

        with self._lock_for(student_id):
            progress = self._load(student_id)

            progress.questions_answered += 1
            progress.time_spent_seconds += time_spent_seconds
            if self._window_size:
                progress.recent_answer_seconds.append(time_spent_seconds)
                del progress.recent_answer_seconds[: -self._window_size]

            answered = progress.questions_answered
            prior_correct = _round_half_up(
                progress.average_accuracy * (answered - 1) / 100
            )
            total_correct = prior_correct + (1 if was_correct else 0)
            progress.average_accuracy = _round_half_up(total_correct / answered * 100)

            if was_correct:
                progress.current_streak += 1
                if progress.current_streak > progress.longest_streak:
                    progress.longest_streak = progress.current_streak
            else:
                progress.current_streak = 0

            if was_correct:
                mastery_gain = MASTERY_GAIN * DIFFICULTY_MULTIPLIER[difficulty]
            else:
                mastery_gain = MASTERY_PENALTY
            mastery = progress.subject_mastery.get(subject, 0) + mastery_gain
            progress.subject_mastery[subject] = max(0, min(100, mastery))

            if was_correct:
                streak_bonus = min(progress.current_streak * 2, MAX_STREAK_BONUS)
                progress.total_points += BASE_POINTS[difficulty] + streak_bonus

            new_level = level_for_points(progress.total_points)
            level_up = new_level > progress.level
            progress.level = new_level
            if level_up:
                logger.info(f"Student {student_id} reached level {new_level}")

            # Achievement points land after the level step and are not folded
            # into this answer's level.
            new_achievements = self._unlock_achievements(progress)

            self.store.put(progress)

        return AnswerOutcome(new_achievements=new_achievements, level_up=level_up)

    def _unlock_achievements(
        self, progress: StudentProgress
    ) -> List[UnlockedAchievement]:
        unlocked = []
        for achievement in pending_unlocks(self.achievements, progress):
            record = UnlockedAchievement(
                **achievement.model_dump(), unlocked_at=self.clock()
            )
            progress.achievements.append(record)
            progress.total_points += achievement.points
            unlocked.append(record)
            logger.info(
                f"Student {progress.student_id} unlocked achievement {achievement.id} "
                f"(+{achievement.points} points)"
            )
        return unlocked

    def generate_daily_challenge(
        self, student_id: str, subject: str, challenge_date: Optional[date] = None
    ) -> DailyChallenge:
        """Return the student's challenge for (date, subject), creating it once"""
        challenge_date = challenge_date or self.clock().date()
        day = challenge_date.isoformat()
        challenge_id = f"daily-{day}-{subject}"

        with self._lock_for(student_id):
            progress = self._load(student_id)
            existing = progress.find_challenge(challenge_id)
            if existing is not None:
                logger.debug(f"Daily challenge {challenge_id} already exists")
                return existing

            challenge = DailyChallenge(
                id=challenge_id,
                date=challenge_date,
                subject=subject,
                question_id=f"challenge-{subject}-{day}",
                bonus_points=DAILY_CHALLENGE_BONUS,
            )
            progress.daily_challenges.append(challenge)
            self.store.put(progress)
            return challenge

    def complete_daily_challenge(
        self, student_id: str, challenge_id: str
    ) -> Optional[DailyChallenge]:
        """
        Mark a challenge completed and award its bonus

        Completing an unknown or already completed challenge changes nothing.
        Returns the challenge, or None when the student has no such challenge.
        """
        with self._lock_for(student_id):
            progress = self._load(student_id)
            challenge = progress.find_challenge(challenge_id)
            if challenge is None:
                logger.debug(f"No daily challenge {challenge_id} for {student_id}")
                return None
            if challenge.completed:
                return challenge

            challenge.completed = True
            challenge.completed_at = self.clock()
            progress.total_points += challenge.bonus_points
            self.store.put(progress)
            return challenge

    def get_leaderboard(self, limit: int = 10) -> List[LeaderboardEntry]:
        """Top students by total points; ties keep insertion order"""
        entries = [
            LeaderboardEntry(
                student_id=p.student_id,
                level=p.level,
                total_points=p.total_points,
                average_accuracy=p.average_accuracy,
                current_streak=p.current_streak,
            )
            for p in self.store.all()
        ]
        entries.sort(key=lambda e: e.total_points, reverse=True)
        return entries[: max(limit, 0)]
