"""
Anonymous voter identity.

The voter id is minted by the server on the first vote attempt, kept in
local storage under a single key and reused for every later vote and
hydration request. Losing local storage makes the client a new voter.
"""

import asyncio

import structlog

from tenkb_votes.core.errors import TransportFailure
from tenkb_votes.core.logging import short_id
from tenkb_votes.repositories.local_storage import LocalStorageProtocol
from tenkb_votes.schemas.vote import Rejection
from tenkb_votes.services.notification_service import StatusNotifier
from tenkb_votes.services.vote_client import VoteClient

logger = structlog.get_logger(__name__)

DEFAULT_VOTER_ID_KEY = "10kb_voter_id"


class IdentityService:
    """
    Reads, issues and persists the voter id.

    Concurrent callers that all find the store empty share one issuance
    request instead of each minting (and overwriting) their own id.
    """

    def __init__(
        self,
        client: VoteClient,
        storage: LocalStorageProtocol,
        notifier: StatusNotifier,
        key: str = DEFAULT_VOTER_ID_KEY,
    ):
        self.client = client
        self.storage = storage
        self.notifier = notifier
        self.key = key
        self._issuing: asyncio.Task[str | None] | None = None

    def peek(self) -> str | None:
        """Return the stored voter id without ever issuing one."""
        return self.storage.get_item(self.key) or None

    def clear(self) -> None:
        """Forget the stored voter id; the next vote issues a new one."""
        self.storage.remove_item(self.key)
        logger.info("voter_id_cleared")

    async def get_identity(self, force: bool = False) -> str | None:
        """
        Return the voter id, issuing and persisting one if needed.

        Args:
            force: request a new id even if one is stored

        Returns:
            The voter id, or None if issuance failed. The failure has
            already been surfaced through the notifier.
        """
        if not force:
            voter_id = self.peek()
            if voter_id:
                return voter_id

        task = self._issuing
        if task is None:
            task = asyncio.create_task(self._issue())
            self._issuing = task
        try:
            # One caller being cancelled must not cancel the shared request
            return await asyncio.shield(task)
        finally:
            if self._issuing is task and task.done():
                self._issuing = None

    async def _issue(self) -> str | None:
        try:
            result = await self.client.issue_identity()
        except TransportFailure as e:
            logger.warning("voter_id_issue_failed", error=e.message)
            self.notifier.notify(f"Error getting voter id: {e.message}")
            return None

        if isinstance(result, Rejection):
            logger.warning("voter_id_rejected", code=result.code, status=result.status)
            self.notifier.notify(f"Unable to generate id: {result.status}")
            return None

        try:
            self.storage.set_item(self.key, result.voter_id)
        except OSError as e:
            # An id that cannot be kept would be re-minted on every vote
            logger.warning("voter_id_save_failed", voter_id=short_id(result.voter_id), error=str(e))
            self.notifier.notify(f"Unable to save voter id: {e}")
            return None
        logger.info("voter_id_issued", voter_id=short_id(result.voter_id))
        return result.voter_id
