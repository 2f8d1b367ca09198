"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(self, message: str = "Bad request"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


# ============================================================================
# Booking domain errors
# ============================================================================


class DoctorNotFoundException(NotFoundException):
    """Referenced doctor does not exist."""

    def __init__(self, message: str = "Doctor not found"):
        super().__init__(message)


class AppointmentNotFoundException(NotFoundException):
    """Referenced appointment does not exist."""

    def __init__(self, message: str = "Appointment not found"):
        super().__init__(message)


class SlotConflictException(BadRequestException):
    """Doctor/date/slot already held by a non-cancelled appointment."""

    def __init__(self, message: str = "Time slot is already booked"):
        super().__init__(message)


class InvalidStateException(BadRequestException):
    """Operation not allowed for the appointment's current status."""

    def __init__(self, operation: str, status: str):
        """
        Build the message from the attempted operation and blocking status.

        Args:
            operation: Verb that was attempted (e.g. "reschedule")
            status: Current appointment status
        """
        self.operation = operation
        self.status = status
        super().__init__(f"Cannot {operation} a {status} appointment")


class AlreadyCancelledException(BadRequestException):
    """Cancel attempted on an already cancelled appointment."""

    def __init__(self, message: str = "Appointment is already cancelled"):
        super().__init__(message)


class NotInQueueException(BadRequestException):
    """Emergency action on an appointment without a queue entry."""

    def __init__(self, message: str = "This appointment is not in the emergency queue"):
        super().__init__(message)


class InvalidSenderException(BadRequestException):
    """Telemedicine message sender is not a doctor or patient."""

    def __init__(self, message: str = 'Invalid sender. Must be "doctor" or "patient"'):
        super().__init__(message)
