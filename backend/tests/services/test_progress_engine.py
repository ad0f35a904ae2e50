"""
Tests for the Progress Engine
"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from tutor.database import InMemoryProgressStore
from tutor.exceptions import InvalidDifficultyError
from tutor.models.progress import (
    AchievementCategory,
    AchievementDefinition,
    Difficulty,
    Rarity,
    StreakRequirement,
)
from tutor.services.progress_engine import ProgressEngine


def answer(engine, student="s1", subject="Physics", correct=True, seconds=10, difficulty="Medium"):
    return engine.record_answer(student, subject, correct, seconds, difficulty)


class TestGetOrCreate:
    def test_new_student_is_zeroed(self, engine):
        progress = engine.get_or_create("s1")

        assert progress.level == 1
        assert progress.total_points == 0
        assert progress.current_streak == 0
        assert progress.longest_streak == 0
        assert progress.questions_answered == 0
        assert progress.average_accuracy == 0
        assert progress.achievements == []
        assert progress.daily_challenges == []
        assert progress.subject_mastery == {
            "Physics": 0,
            "Chemistry": 0,
            "Biology": 0,
            "Mathematics": 0,
        }

    def test_existing_record_is_returned(self, engine):
        answer(engine)
        progress = engine.get_or_create("s1")
        assert progress.questions_answered == 1

    def test_get_stats_creates_lazily(self, engine, progress_store):
        assert "s2" not in progress_store
        stats = engine.get_stats("s2")
        assert stats.student_id == "s2"
        assert "s2" in progress_store


class TestRecordAnswer:
    def test_three_correct_medium_answers(self, engine):
        """Three correct Medium answers unlock first_streak on the third call."""
        first = answer(engine)
        second = answer(engine)
        third = answer(engine)

        progress = engine.get_stats("s1")
        assert progress.current_streak == 3
        assert progress.total_points == (20 + 2) + (20 + 4) + (20 + 6) + 50
        assert progress.total_points == 122
        assert first.new_achievements == []
        assert second.new_achievements == []
        assert [a.id for a in third.new_achievements] == ["first_streak"]

    def test_first_streak_unlocks_exactly_once(self, engine):
        unlocks = []
        for _ in range(12):
            outcome = answer(engine)
            unlocks.append([a.id for a in outcome.new_achievements])
        answer(engine, correct=False)
        for _ in range(4):
            outcome = answer(engine)
            unlocks.append([a.id for a in outcome.new_achievements])

        calls_with_first_streak = [i for i, ids in enumerate(unlocks) if "first_streak" in ids]
        assert calls_with_first_streak == [2]

        progress = engine.get_stats("s1")
        ids = [a.id for a in progress.achievements]
        assert ids.count("first_streak") == 1
        assert len(ids) == len(set(ids))

    def test_unlocked_achievement_is_timestamped(self, engine, clock):
        for _ in range(3):
            outcome = answer(engine)
        assert outcome.new_achievements[0].unlocked_at == clock.now

    def test_streak_never_exceeds_longest(self, engine):
        pattern = [True, True, False, True, True, True, False, False, True] * 4
        for correct in pattern:
            answer(engine, correct=correct)
            progress = engine.get_stats("s1")
            assert progress.current_streak <= progress.longest_streak

        progress = engine.get_stats("s1")
        assert progress.longest_streak == 3
        assert progress.current_streak == 1

    def test_incorrect_answer_resets_streak_and_awards_nothing(self, engine):
        answer(engine)
        answer(engine)
        before = engine.get_stats("s1").total_points

        outcome = answer(engine, correct=False)

        progress = engine.get_stats("s1")
        assert progress.current_streak == 0
        assert progress.longest_streak == 2
        assert progress.total_points == before
        assert outcome.level_up is False

    def test_streak_bonus_is_capped(self):
        engine = ProgressEngine(InMemoryProgressStore(), achievements=())
        for _ in range(30):
            answer(engine, difficulty="Easy")
        before = engine.get_stats("s1").total_points

        answer(engine, difficulty="Easy")

        assert engine.get_stats("s1").total_points - before == 10 + 50

    @pytest.mark.parametrize(
        "difficulty,points",
        [("Easy", 12), ("Medium", 22), ("Hard", 32), (Difficulty.HARD, 32)],
    )
    def test_base_points_by_difficulty(self, difficulty, points):
        engine = ProgressEngine(InMemoryProgressStore(), achievements=())
        answer(engine, difficulty=difficulty)
        assert engine.get_stats("s1").total_points == points

    def test_accuracy_follows_incremental_formula(self, engine):
        averages = []
        for correct in [True, False, True, False]:
            answer(engine, correct=correct)
            averages.append(engine.get_stats("s1").average_accuracy)

        assert averages == [100, 50, 67, 50]

    def test_accuracy_rounds_half_up(self, engine):
        answer(engine, correct=True)
        for _ in range(7):
            answer(engine, correct=False)

        # 1 correct out of 8 is 12.5%
        assert engine.get_stats("s1").average_accuracy == 13

    def test_mastery_gain_by_difficulty(self, engine):
        answer(engine, subject="Physics", difficulty="Easy")
        answer(engine, subject="Chemistry", difficulty="Medium")
        answer(engine, subject="Biology", difficulty="Hard")
        answer(engine, subject="Mathematics", correct=False)

        mastery = engine.get_stats("s1").subject_mastery
        assert mastery["Physics"] == 5
        assert mastery["Chemistry"] == 7.5
        assert mastery["Biology"] == 10
        assert mastery["Mathematics"] == 0

    def test_mastery_is_clamped(self, engine):
        for _ in range(40):
            answer(engine, subject="Biology", correct=False)
            assert 0 <= engine.get_stats("s1").subject_mastery["Biology"] <= 100
        for _ in range(60):
            answer(engine, subject="Biology", difficulty="Hard")
            assert 0 <= engine.get_stats("s1").subject_mastery["Biology"] <= 100

        assert engine.get_stats("s1").subject_mastery["Biology"] == 100

        answer(engine, subject="Biology", correct=False)
        assert engine.get_stats("s1").subject_mastery["Biology"] == 98

    def test_unknown_subject_is_tracked(self, engine):
        answer(engine, subject="Astronomy", difficulty="Easy")
        assert engine.get_stats("s1").subject_mastery["Astronomy"] == 5

    def test_time_spent_accumulates(self, engine):
        answer(engine, seconds=90)
        answer(engine, seconds=45)

        progress = engine.get_stats("s1")
        assert progress.time_spent_seconds == 135
        assert progress.time_spent == 2

    def test_invalid_difficulty_fails_fast(self, engine):
        with pytest.raises(InvalidDifficultyError):
            answer(engine, difficulty="Impossible")

        assert isinstance(InvalidDifficultyError("x"), ValueError)
        assert engine.get_stats("s1").questions_answered == 0


class TestLevels:
    def test_level_matches_points_after_every_answer(self):
        engine = ProgressEngine(InMemoryProgressStore(), achievements=())
        for i in range(80):
            answer(engine, correct=i % 7 != 0, difficulty="Hard")
            progress = engine.get_stats("s1")
            assert progress.level == progress.total_points // 1000 + 1

    def test_level_up_reported_once(self):
        engine = ProgressEngine(InMemoryProgressStore(), achievements=())
        outcomes = [answer(engine, difficulty="Hard") for _ in range(25)]

        level_ups = [i for i, o in enumerate(outcomes) if o.level_up]
        # 19 answers total 950 points, the 20th reaches 1020
        assert level_ups == [19]
        assert engine.get_stats("s1").level == 2

    def test_achievement_points_do_not_level_up_same_answer(self):
        jackpot = AchievementDefinition(
            id="jackpot",
            title="Jackpot",
            description="First correct answer",
            icon="*",
            category=AchievementCategory.SPECIAL,
            requirement=StreakRequirement(threshold=1),
            points=1000,
            rarity=Rarity.LEGENDARY,
        )
        engine = ProgressEngine(InMemoryProgressStore(), achievements=[jackpot])

        first = answer(engine, difficulty="Easy")
        progress = engine.get_stats("s1")
        assert progress.total_points == 1012
        assert progress.level == 1
        assert first.level_up is False

        second = answer(engine, difficulty="Easy")
        assert second.level_up is True
        assert engine.get_stats("s1").level == 2


class TestAchievements:
    def test_speed_demon_needs_ten_fast_answers(self, engine):
        outcomes = [answer(engine, seconds=20, correct=i % 2 == 0) for i in range(10)]

        assert all("speed_demon" not in [a.id for a in o.new_achievements] for o in outcomes[:9])
        assert "speed_demon" in [a.id for a in outcomes[9].new_achievements]

    def test_slow_answers_do_not_unlock_speed_demon(self, engine):
        for _ in range(15):
            answer(engine, seconds=40, correct=False)
        assert not engine.get_stats("s1").has_achievement("speed_demon")

    def test_recent_answer_window_is_bounded(self, engine):
        for i in range(25):
            answer(engine, seconds=i)
        assert engine.get_stats("s1").recent_answer_seconds == list(range(15, 25))

    def test_accuracy_achievements_wait_for_enough_questions(self, engine):
        for _ in range(9):
            answer(engine, seconds=60)
        assert not engine.get_stats("s1").has_achievement("perfectionist")

        outcome = answer(engine, seconds=60)
        assert "perfectionist" in [a.id for a in outcome.new_achievements]
        assert not engine.get_stats("s1").has_achievement("sharp_shooter")

    def test_topic_mastery_achievement(self, engine):
        # Hard answers add 10 mastery each, so the 9th crosses 85
        for _ in range(8):
            answer(engine, subject="Chemistry", difficulty="Hard", seconds=60)
        assert not engine.get_stats("s1").has_achievement("chemistry_wizard")

        outcome = answer(engine, subject="Chemistry", difficulty="Hard", seconds=60)
        assert "chemistry_wizard" in [a.id for a in outcome.new_achievements]

    def test_daily_warrior_on_seventh_correct_answer_in_a_row(self, engine):
        for _ in range(6):
            answer(engine, seconds=60)
        assert not engine.get_stats("s1").has_achievement("daily_warrior")

        outcome = answer(engine, seconds=60)
        assert "daily_warrior" in [a.id for a in outcome.new_achievements]

    def test_daily_warrior_ignores_completed_challenges(self, engine):
        challenge = engine.generate_daily_challenge("s1", "Physics", date(2024, 3, 1))
        engine.complete_daily_challenge("s1", challenge.id)
        answer(engine, seconds=60)

        assert not engine.get_stats("s1").has_achievement("daily_warrior")


class TestDailyChallenges:
    def test_generate_is_idempotent(self, engine):
        day = date(2024, 3, 15)
        first = engine.generate_daily_challenge("s1", "Physics", day)
        second = engine.generate_daily_challenge("s1", "Physics", day)

        assert first.id == second.id == "daily-2024-03-15-Physics"
        assert first.question_id == "challenge-Physics-2024-03-15"
        assert first.bonus_points == 100
        assert first.completed is False
        assert len(engine.get_stats("s1").daily_challenges) == 1

    def test_generate_defaults_to_clock_date(self, engine, clock):
        challenge = engine.generate_daily_challenge("s1", "Biology")
        assert challenge.date == clock.now.date()

    def test_distinct_subjects_and_days(self, engine):
        engine.generate_daily_challenge("s1", "Physics", date(2024, 3, 15))
        engine.generate_daily_challenge("s1", "Biology", date(2024, 3, 15))
        engine.generate_daily_challenge("s1", "Physics", date(2024, 3, 16))

        ids = [c.id for c in engine.get_stats("s1").daily_challenges]
        assert ids == [
            "daily-2024-03-15-Physics",
            "daily-2024-03-15-Biology",
            "daily-2024-03-16-Physics",
        ]

    def test_existing_challenge_is_returned_unchanged(self, engine):
        day = date(2024, 3, 15)
        challenge = engine.generate_daily_challenge("s1", "Physics", day)
        engine.complete_daily_challenge("s1", challenge.id)

        again = engine.generate_daily_challenge("s1", "Physics", day)
        assert again.completed is True

    def test_complete_awards_bonus_once(self, engine, clock):
        challenge = engine.generate_daily_challenge("s1", "Physics")

        completed = engine.complete_daily_challenge("s1", challenge.id)
        assert completed.completed is True
        assert completed.completed_at == clock.now
        assert engine.get_stats("s1").total_points == 100

        engine.complete_daily_challenge("s1", challenge.id)
        assert engine.get_stats("s1").total_points == 100

    def test_complete_unknown_challenge_is_noop(self, engine):
        assert engine.complete_daily_challenge("s1", "daily-1999-01-01-Physics") is None
        assert engine.get_stats("s1").total_points == 0


class TestLeaderboard:
    def test_top_students_sorted_by_points(self):
        engine = ProgressEngine(InMemoryProgressStore(), achievements=())
        for student, correct_answers in [("a", 1), ("b", 5), ("c", 3), ("d", 0), ("e", 4)]:
            engine.get_or_create(student)
            for _ in range(correct_answers):
                answer(engine, student=student)

        board = engine.get_leaderboard(3)

        assert len(board) == 3
        assert [e.student_id for e in board] == ["b", "e", "c"]
        points = [e.total_points for e in board]
        assert points == sorted(points, reverse=True)

    def test_ties_keep_insertion_order(self, engine):
        for student in ["x", "y", "z"]:
            engine.get_or_create(student)

        assert [e.student_id for e in engine.get_leaderboard()] == ["x", "y", "z"]

    def test_leaderboard_is_read_only(self, engine, progress_store):
        engine.get_or_create("s1")
        engine.get_leaderboard(10)
        assert len(progress_store) == 1
        assert engine.get_leaderboard(0) == []


class TestConcurrency:
    def test_parallel_answers_for_one_student_are_not_lost(self):
        engine = ProgressEngine(InMemoryProgressStore(), achievements=())

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: answer(engine, difficulty="Easy", correct=False), range(200)))

        progress = engine.get_stats("s1")
        assert progress.questions_answered == 200
        assert progress.time_spent_seconds == 2000

    def test_leaderboard_while_new_students_join(self):
        engine = ProgressEngine(InMemoryProgressStore(), achievements=())
        for n in range(300):
            engine.get_or_create(f"seed-{n}")

        def join():
            for n in range(500):
                answer(engine, student=f"new-{n}")

        def rank():
            for _ in range(200):
                engine.get_leaderboard(5)

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(join), pool.submit(rank)]
            errors = [f.exception() for f in futures if f.exception() is not None]

        assert errors == []
        assert len(engine.get_leaderboard(1000)) == 800
