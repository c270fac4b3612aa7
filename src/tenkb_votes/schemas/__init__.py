"""Schemas module initialization."""

from tenkb_votes.schemas.vote import (
    IdentityIssued,
    Rejection,
    ResponseEnvelope,
    VoteAccepted,
    VotesFetched,
    VoteState,
    VoteValue,
    parse_vote,
)

__all__ = [
    "IdentityIssued",
    "Rejection",
    "ResponseEnvelope",
    "VoteAccepted",
    "VotesFetched",
    "VoteState",
    "VoteValue",
    "parse_vote",
]
