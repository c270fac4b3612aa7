"""
Initial vote state for every site on a page.

One ``/votes/`` request covers all listed sites. Hydration never issues a
voter id (a passive visitor stays anonymous) and never fails loudly: if the
bulk request fails every site simply stays unvoted and voting still works.
"""

from collections.abc import Iterable

import structlog

from tenkb_votes.core.errors import TransportFailure
from tenkb_votes.core.logging import short_id
from tenkb_votes.schemas.vote import Rejection, VoteState
from tenkb_votes.services.identity_service import IdentityService
from tenkb_votes.services.vote_client import VoteClient
from tenkb_votes.services.vote_service import VoteService

logger = structlog.get_logger(__name__)


class HydrationService:
    """Applies the server's vote set to the page's controls."""

    def __init__(
        self,
        client: VoteClient,
        identity: IdentityService,
        votes: VoteService,
    ):
        self.client = client
        self.identity = identity
        self.votes = votes

    async def hydrate(self, page_site_ids: Iterable[str]) -> dict[str, VoteState]:
        """
        Initialise the vote state of every listed site.

        Args:
            page_site_ids: site ids supplied by the host page, duplicates allowed

        Returns:
            The resulting state of each listed site
        """
        site_ids = list(dict.fromkeys(str(site_id) for site_id in page_site_ids))
        self.votes.register(site_ids)

        if not site_ids:
            return {}

        voter_id = self.identity.peek()
        logger.debug("hydrating_votes", count=len(site_ids), voter_id=short_id(voter_id))

        try:
            result = await self.client.fetch_votes(site_ids, voter_id)
        except TransportFailure as e:
            logger.warning("vote_hydration_failed", error=e.message)
            return self.votes.snapshot(site_ids)

        if isinstance(result, Rejection):
            logger.warning("vote_hydration_rejected", code=result.code, status=result.status)
            return self.votes.snapshot(site_ids)

        upvoted = [site_id for site_id in site_ids if site_id in result.site_ids]
        self.votes.mark_upvoted(upvoted)
        logger.info("votes_hydrated", sites=len(site_ids), upvoted=len(upvoted))
        return self.votes.snapshot(site_ids)
