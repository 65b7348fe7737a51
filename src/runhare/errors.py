"""Exceptions raised at the RunHare client boundary."""


class RunHareError(Exception):
    """Base class for RunHare errors."""

    pass


class MessageFailedError(RunHareError):
    """
    Raised when an event could not be delivered to the service.

    The message has the form ``message-failed:<cause>`` so callers can tell
    transmission failures apart from local programming errors.
    """

    PREFIX = "message-failed"

    def __init__(self, cause_message: str):
        self.cause_message = cause_message
        super().__init__(f"{self.PREFIX}:{cause_message}")
