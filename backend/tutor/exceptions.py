class TutorError(Exception):
    """Base exception for the tutor backend."""

    pass


class InvalidDifficultyError(TutorError, ValueError):
    """Raised when an answer is reported with a difficulty outside Easy/Medium/Hard."""

    pass


class UnknownActionError(TutorError, ValueError):
    """Raised when a usage action is not one of the metered or gated features."""

    pass
