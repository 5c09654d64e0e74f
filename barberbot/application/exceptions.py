class ReservationConflictError(RuntimeError):
    """Raised when a reservation would share (date, time, provider) with a live one."""
    pass


class RepositoryError(RuntimeError):
    """Raised when the reservation store fails (connection lost, driver errors)."""
    pass


class NotificationError(RuntimeError):
    """Raised when the outbound notification provider rejects or cannot receive a message."""
    pass
