"""
Error taxonomy for progress persistence.

None of these reach the presentation layer: ProgressRecorder.record turns
each of them into a RecordResult.
"""


class OnboardingError(Exception):
    """Base class for onboarding errors."""


class ConfigurationMissing(OnboardingError):
    """The remote store is not configured or could not be initialised."""


class UniqueConstraintConflict(OnboardingError):
    """An insert collided with an existing row for the same designer_name."""

    def __init__(self, designer_name: str):
        super().__init__(f"Progress row already exists for {designer_name!r}")
        self.designer_name = designer_name


class PersistenceFailure(OnboardingError):
    """An insert or fallback update failed for a reason other than a conflict."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"Progress {operation} failed: {cause}")
        self.operation = operation
        self.cause = cause
