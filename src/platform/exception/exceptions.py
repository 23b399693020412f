class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    """Malformed or incomplete request (bad request)"""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class InvalidOwnershipError(CustomBaseError):
    """Payload owner or event does not match the stored booking (tampering or reuse)"""

    def __init__(self, message: str = 'Invalid ticket ownership') -> None:
        super().__init__(message, 400)


class BookingNotConfirmedError(CustomBaseError):
    def __init__(self, *, booking_status: str) -> None:
        self.booking_status = booking_status
        super().__init__(f'Ticket is not confirmed (booking status: {booking_status})', 400)


class NotReadyError(CustomBaseError):
    """Gift ticket has not been delivered yet"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class GatewayError(CustomBaseError):
    """Bank gateway call failed (network, non-2xx, timeout or unreadable body)"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 502)
