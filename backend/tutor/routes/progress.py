"""
Per-student progress API routes
"""

from fastapi import APIRouter, HTTPException, Depends, Request

from tutor.exceptions import TutorError
from tutor.models.progress import (
    AnswerCreate,
    AnswerOutcome,
    DailyChallenge,
    DailyChallengeCreate,
    StudentProgress,
)
from tutor.services.progress_engine import ProgressEngine

# Create router
router = APIRouter()


# Dependency to get the engine owned by the running application
def get_progress_engine(request: Request) -> ProgressEngine:
    return request.app.state.progress_engine


@router.get("/{student_id}", response_model=StudentProgress)
def get_stats(
    student_id: str, engine: ProgressEngine = Depends(get_progress_engine)
):
    """Get a student's progress, creating it on first access"""
    return engine.get_stats(student_id)


@router.post("/{student_id}/answers", response_model=AnswerOutcome)
def record_answer(
    student_id: str,
    answer: AnswerCreate,
    engine: ProgressEngine = Depends(get_progress_engine),
):
    """Record an answered question and return unlocked achievements"""
    try:
        return engine.record_answer(
            student_id,
            answer.subject,
            answer.was_correct,
            answer.time_spent_seconds,
            answer.difficulty,
        )
    except TutorError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{student_id}/daily-challenges", response_model=DailyChallenge)
def generate_daily_challenge(
    student_id: str,
    challenge: DailyChallengeCreate,
    engine: ProgressEngine = Depends(get_progress_engine),
):
    """Get or create the student's daily challenge for a subject"""
    return engine.generate_daily_challenge(
        student_id, challenge.subject, challenge.challenge_date
    )


@router.post(
    "/{student_id}/daily-challenges/{challenge_id}/complete",
    response_model=DailyChallenge,
)
def complete_daily_challenge(
    student_id: str,
    challenge_id: str,
    engine: ProgressEngine = Depends(get_progress_engine),
):
    """Complete a daily challenge and award its bonus points"""
    challenge = engine.complete_daily_challenge(student_id, challenge_id)
    if challenge is None:
        raise HTTPException(status_code=404, detail="Daily challenge not found")
    return challenge
