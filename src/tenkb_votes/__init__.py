"""
10kbclub voting client.

Anonymous voter identity, bulk vote hydration and vote toggling against the
10kbclub HTTP API.
"""

from tenkb_votes.core.config import Settings, get_settings
from tenkb_votes.core.logging import configure_logging
from tenkb_votes.page import VotePage, create_page
from tenkb_votes.schemas.vote import VoteState, VoteValue

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "VotePage",
    "VoteState",
    "VoteValue",
    "configure_logging",
    "create_page",
    "get_settings",
]
