"""
Custom application exceptions.

These exceptions represent business rule violations. The HTTP layer turns
them into JSON error responses; the message is safe to show to staff.
"""
from typing import Optional


class StudioFlowError(Exception):
    """Base exception for all application errors."""

    message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, **kwargs):
        self.message = message or self.message
        self.details = kwargs
        super().__init__(self.message)


class NotFoundError(StudioFlowError):
    """Requested entity does not exist for this tenant."""
    message = "Not found"

    def __init__(self, entity_id: Optional[int] = None):
        self.entity_id = entity_id
        super().__init__(
            f"{self.message} (#{entity_id})" if entity_id is not None else self.message
        )


class ConflictError(StudioFlowError):
    """Operation clashes with the current state of an entity."""
    message = "Conflicting state"


# ============== Access ==============

class PermissionDeniedError(StudioFlowError):
    """Caller may not perform this action."""
    message = "Access denied"


class TenantRequiredError(PermissionDeniedError):
    """Request did not identify a tenant."""
    message = "X-Tenant-Id header is required"


# ============== Roster ==============

class ClientNotFoundError(NotFoundError):
    """Client not found."""
    message = "Client not found"


class CoachNotFoundError(NotFoundError):
    """Coach not found."""
    message = "Coach not found"


class CoachNotEligibleError(ConflictError):
    """Coach does not match the waiting list entry."""
    message = "Coach is not available for this client"


# ============== Packages ==============

class PackageError(StudioFlowError):
    """Base package error."""
    message = "Package error"


class PackageNotFoundError(NotFoundError):
    """Package not found."""
    message = "Package not found"


class ClientPackageNotFoundError(NotFoundError):
    """Client package not found."""
    message = "Client package not found"


class PackageInactiveError(PackageError):
    """Package is archived and cannot be sold."""
    message = "Package is inactive"


class PackageLockedError(PackageError):
    """Package terms cannot change once clients bought it."""
    message = (
        "Cannot modify sessions, price or validity of a package "
        "that has been assigned to clients"
    )


class PackageUnavailableError(PackageError):
    """Session taken from a depleted or expired package."""
    message = "Package is depleted or expired"

    def __init__(self, status: str, sessions_remaining: int):
        self.status = status
        self.sessions_remaining = sessions_remaining
        super().__init__(
            f"Package is not usable (status '{status}', {sessions_remaining} sessions remaining)"
        )


class InvalidAdjustmentError(PackageError):
    """Manual correction would break the session counters."""
    message = "Invalid session adjustment"


class NoUsablePackageError(PackageError):
    """Client has no package to pay for a session."""
    message = "Client has no active package with sessions remaining"


# ============== Waiting list ==============

class WaitingListError(StudioFlowError):
    """Base waiting list error."""
    message = "Waiting list error"


class WaitingListEntryNotFoundError(NotFoundError):
    """Waiting list entry not found."""
    message = "Waiting list entry not found"


class WaitingListStatusError(ConflictError):
    """Invalid waiting list status transition."""
    message = "Cannot change waiting list status"

    def __init__(self, current_status: str, target_status: str):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Cannot change waiting list status from '{current_status}' to '{target_status}'"
        )


# ============== Sessions ==============

class SessionNotFoundError(NotFoundError):
    """Training session not found."""
    message = "Session not found"


class SessionConflictError(ConflictError):
    """Coach or room is already booked."""
    message = "Selected time is already taken"

    def __init__(self, resource: str, start_time: Optional[str] = None):
        self.resource = resource
        self.start_time = start_time
        super().__init__(
            f"{resource.capitalize()} is already booked at {start_time}"
            if start_time else f"{resource.capitalize()} is already booked"
        )


class SessionStatusError(ConflictError):
    """Invalid session status transition."""

    def __init__(self, current_status: str, target_status: str):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Cannot change session status from '{current_status}' to '{target_status}'"
        )


# ============== Transactions ==============

class TransactionError(StudioFlowError):
    """Base transaction error."""
    message = "Transaction error"


class TransactionNotFoundError(NotFoundError):
    """Transaction not found."""
    message = "Transaction not found"


class TransactionAlreadyPaidError(ConflictError):
    """Payment confirmed twice."""
    message = "Transaction is already paid"


# ============== Validation ==============

class ValidationError(StudioFlowError):
    """Data validation error."""
    message = "Validation error"

    def __init__(self, field: str, error: str):
        self.field = field
        self.error = error
        super().__init__(f"Invalid '{field}': {error}")


# ============== External Services ==============

class NotificationError(StudioFlowError):
    """Client could not be notified."""
    message = "Notification could not be sent"
