"""Domain errors for the study tracker."""


class StudyTrackerError(Exception):
    """Base class for errors surfaced to callers."""


class TimeWindowViolation(StudyTrackerError):
    """Raised when a timer is started outside its period window."""


class LeaveDayActive(StudyTrackerError):
    """Raised when a timer is started on a day marked as leave."""


class TimerAlreadyRunning(StudyTrackerError):
    """Raised when starting a period timer that is already running."""


class NotFound(StudyTrackerError):
    """Raised for unknown records, including inactive share codes."""


class StoreUnavailable(StudyTrackerError):
    """Raised when a storage backend fails to complete an operation."""
