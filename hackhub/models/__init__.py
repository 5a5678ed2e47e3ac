from .models import (
    Application,
    ApplicationStatus,
    Notification,
    NotificationType,
    ProblemType,
    Profile,
    ProfileRole,
    TeamProblemSubmission,
    TimestampedBase,
)

__all__ = [
    "Application",
    "ApplicationStatus",
    "Notification",
    "NotificationType",
    "ProblemType",
    "Profile",
    "ProfileRole",
    "TeamProblemSubmission",
    "TimestampedBase",
]
