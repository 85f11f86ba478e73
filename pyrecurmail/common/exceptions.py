# pyrecurmail/common/exceptions.py


class PyRecurMailException(Exception):
    """Base exception for the PyRecurMail library."""

    pass


class InvalidInput(PyRecurMailException, ValueError):
    """Raised when a start request is missing a field or has a bad interval."""

    pass


class DispatchFailure(PyRecurMailException):
    """Raised when a dispatch attempt could not deliver its message."""

    def __init__(self, recipient: str, error: str):
        super().__init__(f"Could not send email to {recipient}: {error}")
        self.recipient = recipient
        self.error = error
