"""
Host page wiring.

A ``VotePage`` is what an embedding page holds: it builds the transport,
identity store, vote state machine and hydrator from settings, hydrates the
page's sites on load and routes clicks to the right control.

Usage:
    async with create_page() as page:
        await page.load(["12", "34", "56"])
        await page.click("34")
"""

from collections.abc import Iterable

import httpx
import structlog

from tenkb_votes.core.config import Settings, get_settings
from tenkb_votes.repositories.local_storage import FileLocalStorage, LocalStorageProtocol
from tenkb_votes.schemas.vote import VoteState, VoteValue
from tenkb_votes.services.hydration_service import HydrationService
from tenkb_votes.services.identity_service import IdentityService
from tenkb_votes.services.notification_service import LoggingNotifier, StatusNotifier
from tenkb_votes.services.vote_client import VoteClient
from tenkb_votes.services.vote_service import VoteControl, VoteService

logger = structlog.get_logger(__name__)


class VotePage:
    """The voting surface of one rendered page."""

    def __init__(
        self,
        client: VoteClient,
        storage: LocalStorageProtocol,
        notifier: StatusNotifier,
        voter_id_key: str,
    ):
        self.client = client
        self.notifier = notifier
        self.identity = IdentityService(client, storage, notifier, key=voter_id_key)
        self.votes = VoteService(client, self.identity, notifier)
        self.hydrator = HydrationService(client, self.identity, self.votes)

    async def __aenter__(self) -> "VotePage":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def load(self, site_ids: Iterable[str]) -> dict[str, VoteState]:
        """Page load: hydrate every listed site."""
        return await self.hydrator.hydrate(site_ids)

    async def click(self, site_id: str) -> bool:
        return await self.votes.click(site_id)

    async def cast(self, site_id: str, vote: VoteValue | int) -> bool:
        return await self.votes.cast(site_id, vote)

    def control(self, site_id: str) -> VoteControl:
        return self.votes.control(site_id)

    def state(self) -> dict[str, VoteState]:
        return self.votes.snapshot()


def create_page(
    settings: Settings | None = None,
    *,
    storage: LocalStorageProtocol | None = None,
    notifier: StatusNotifier | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> VotePage:
    """Create and configure a page from settings."""
    settings = settings or get_settings()
    storage = storage if storage is not None else FileLocalStorage(settings.STORAGE_PATH)

    page = VotePage(
        client=VoteClient(settings, http_client=http_client),
        storage=storage,
        notifier=notifier or LoggingNotifier(),
        voter_id_key=settings.VOTER_ID_KEY,
    )
    logger.debug("vote_page_created", base_url=settings.BASE_URL)
    return page
