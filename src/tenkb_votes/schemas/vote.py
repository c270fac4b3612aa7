"""
Vote-related Pydantic schemas.

Every endpoint answers with a ``{code, status, ...payload}`` body. These
models decode that body once, at the transport boundary, into a tagged
result: the endpoint's success model or a ``Rejection``.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from tenkb_votes.core.errors import ApplicationRejection, LocalValidationError

SUCCESS_CODE = 200


class VoteState(str, Enum):
    """Displayed vote state of a single site."""

    UNVOTED = "unvoted"
    UPVOTED = "upvoted"


class VoteValue(int, Enum):
    """Wire value of the ``vote`` form field."""

    REMOVE = 0
    ADD = 1

    @property
    def resulting_state(self) -> VoteState:
        """State a site is in once this vote has been accepted."""
        return VoteState.UPVOTED if self is VoteValue.ADD else VoteState.UNVOTED


def parse_vote(value: Any) -> VoteValue:
    """
    Validate a requested vote value.

    Raises:
        LocalValidationError: if the value is not 0 or 1
    """
    # bool is an int subclass; True/False are not votes
    if isinstance(value, bool) or not isinstance(value, int):
        raise LocalValidationError("Invalid vote!")
    try:
        return VoteValue(value)
    except ValueError:
        raise LocalValidationError("Invalid vote!") from None


class ResponseEnvelope(BaseModel):
    """Fields shared by every response body."""

    code: int
    status: str | None = None

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE


class Rejection(BaseModel):
    """Well-formed response signalling failure."""

    code: int
    status: str

    def to_error(self) -> ApplicationRejection:
        return ApplicationRejection(self.code, self.status)


class IdentityIssued(BaseModel):
    """Successful ``/id/`` response."""

    voter_id: str = Field(..., min_length=1)


class VoteAccepted(BaseModel):
    """Successful ``/vote/`` response."""

    status: str | None = "OK"


class VotesFetched(BaseModel):
    """Successful ``/votes/`` response: the subset already upvoted."""

    site_ids: frozenset[str]

    @field_validator("site_ids", mode="before")
    @classmethod
    def coerce_site_ids(cls, v: Any) -> Any:
        """The server sends numeric ids; the client treats ids as opaque strings."""
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(str(site_id) for site_id in v)
        return v
