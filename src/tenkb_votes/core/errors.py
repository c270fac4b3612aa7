"""
Error taxonomy for the voting client.

Transport failures are raised by the HTTP layer, application rejections are
returned as results and only turned into exceptions on request, and local
validation errors are raised before any request is made.
"""


class VotingError(Exception):
    """Base class for all voting client errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportFailure(VotingError):
    """The server could not be reached or answered with a malformed body."""


class ApplicationRejection(VotingError):
    """The server answered with a well-formed body and a non-200 code."""

    def __init__(self, code: int, status: str):
        super().__init__(status)
        self.code = code
        self.status = status


class LocalValidationError(VotingError):
    """A request was refused locally, before reaching the network."""
