"""
Per-site vote state and the vote/unvote transitions.

Each listed site has one ``VoteControl``. Its state is either ``unvoted`` or
``upvoted`` and changes only when the server confirms a vote. A single
click handler per site reads the current state and requests the opposite,
so flipping the state is also what rebinds the next click.
"""

from collections.abc import Iterable

import structlog

from tenkb_votes.core.errors import LocalValidationError, TransportFailure
from tenkb_votes.core.logging import short_id
from tenkb_votes.schemas.vote import Rejection, VoteState, VoteValue, parse_vote
from tenkb_votes.services.identity_service import IdentityService
from tenkb_votes.services.notification_service import StatusNotifier
from tenkb_votes.services.vote_client import VoteClient

logger = structlog.get_logger(__name__)

# Rightwards arrow shown on every vote control
VOTE_LABEL = "➡"


class VoteControl:
    """The vote element of one listed site."""

    label = VOTE_LABEL

    def __init__(self, site_id: str, state: VoteState = VoteState.UNVOTED):
        self.site_id = site_id
        self.state = state
        self.pending = False  # a vote request is in flight

    @property
    def next_vote(self) -> VoteValue:
        """The transition the next click requests."""
        return VoteValue.REMOVE if self.state is VoteState.UPVOTED else VoteValue.ADD

    @property
    def css_class(self) -> str:
        return self.state.value

    def __repr__(self) -> str:
        return f"VoteControl(site_id={self.site_id!r}, state={self.state.value}, pending={self.pending})"


class VoteService:
    """
    Vote state machine for every control on the page.

    Features:
    - Lazy voter id issuance on the first vote
    - Local rejection of vote values other than 0 and 1
    - State changes only on a confirmed ``{code: 200}``
    - Clicks on a control with a request in flight are ignored
    """

    def __init__(
        self,
        client: VoteClient,
        identity: IdentityService,
        notifier: StatusNotifier,
    ):
        self.client = client
        self.identity = identity
        self.notifier = notifier
        self._controls: dict[str, VoteControl] = {}

    def register(self, site_ids: Iterable[str]) -> list[VoteControl]:
        """Create (or reset) controls for ``site_ids`` in the unvoted state."""
        controls = []
        for site_id in map(str, site_ids):
            control = self._controls.get(site_id)
            if control is None:
                control = VoteControl(site_id)
                self._controls[site_id] = control
            else:
                control.state = VoteState.UNVOTED
            controls.append(control)
        return controls

    def mark_upvoted(self, site_ids: Iterable[str]) -> None:
        for site_id in map(str, site_ids):
            self._controls[site_id].state = VoteState.UPVOTED

    def control(self, site_id: str) -> VoteControl:
        """Look up a registered control. Raises KeyError for unknown sites."""
        return self._controls[str(site_id)]

    def snapshot(self, site_ids: Iterable[str] | None = None) -> dict[str, VoteState]:
        """Current state of the given sites (all registered sites by default)."""
        if site_ids is None:
            return {site_id: c.state for site_id, c in self._controls.items()}
        return {site_id: self._controls[site_id].state for site_id in map(str, site_ids)}

    async def click(self, site_id: str) -> bool:
        """Handle a click on a site's control."""
        control = self._controls[str(site_id)]
        return await self.cast(site_id, control.next_vote)

    async def cast(self, site_id: str, target_vote: VoteValue | int) -> bool:
        """
        Request a vote transition for a site.

        Site ids are compared as strings, so 12 and "12" name the same control.

        Args:
            site_id: the site to vote on
            target_vote: 1 to add the vote, 0 to remove it

        Returns:
            True if the server accepted the vote and the state was updated,
            False on any failure (already surfaced through the notifier)
        """
        try:
            vote = parse_vote(target_vote)
        except LocalValidationError as e:
            logger.warning("invalid_vote", site_id=site_id, vote=target_vote)
            self.notifier.notify(e.message)
            return False

        site_id = str(site_id)
        control = self._controls.get(site_id)
        if control is None:
            control = self.register([site_id])[0]

        if control.pending:
            logger.debug("vote_in_flight", site_id=site_id)
            return False

        control.pending = True
        try:
            return await self._cast(control, vote)
        finally:
            control.pending = False

    async def _cast(self, control: VoteControl, vote: VoteValue) -> bool:
        voter_id = await self.identity.get_identity()
        if voter_id is None:
            return False

        try:
            result = await self.client.cast_vote(control.site_id, voter_id, vote)
        except TransportFailure as e:
            self.notifier.notify(f"Error casting vote: {e.message}")
            return False

        if isinstance(result, Rejection):
            self.notifier.notify(f"Unable to vote: {result.status}")
            return False

        control.state = vote.resulting_state
        logger.info(
            "vote_cast",
            site_id=control.site_id,
            voter_id=short_id(voter_id),
            vote=int(vote),
            state=control.state.value,
        )
        return True
