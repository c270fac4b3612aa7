"""Services module initialization."""

from tenkb_votes.services.hydration_service import HydrationService
from tenkb_votes.services.identity_service import IdentityService
from tenkb_votes.services.notification_service import (
    CollectingNotifier,
    LoggingNotifier,
    StatusNotifier,
)
from tenkb_votes.services.vote_client import VoteClient
from tenkb_votes.services.vote_service import VoteControl, VoteService

__all__ = [
    "CollectingNotifier",
    "HydrationService",
    "IdentityService",
    "LoggingNotifier",
    "StatusNotifier",
    "VoteClient",
    "VoteControl",
    "VoteService",
]
