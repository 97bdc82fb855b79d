class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class RemoteStoreError(DomainError):
    """Raised when a call to the record store fails."""


class RemoteTimeoutError(RemoteStoreError):
    """Raised when a record store call does not resolve in time."""


class LoadError(DomainError):
    """A board, roster or teacher list could not be read."""


class SyncError(DomainError):
    """Publishing attendance failed or was refused."""


class IntegrityError(DomainError):
    """A class was deleted but some teachers still reference its name."""

    def __init__(self, message: str, *, class_name: str, teacher_ids: tuple[str, ...] = ()):
        super().__init__(message)
        self.class_name = class_name
        self.teacher_ids = teacher_ids


class FeedbackNotMountedError(RuntimeError):
    """Feedback was used before mount() or after unmount()."""
