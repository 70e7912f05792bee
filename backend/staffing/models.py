from staffing.domain.models import (  # noqa: F401
    MemberRole,
    ServiceStatus,
    AssignmentStatus,
    AvailabilityStatus,
    SwapStatus,
    NotificationType,
    Member,
    Service,
    ServiceAssignment,
    Availability,
    SwapRequest,
    Notification,
    AuditLog,
)
