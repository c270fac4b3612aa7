"""
HTTP transport for the voting API.

Three single request/response exchanges against the 10kbclub server:

- ``POST /id/``: mint a fresh anonymous voter id
- ``POST /vote/``: add (1) or remove (0) a vote for one site
- ``POST /votes/``: which of the given sites has this voter upvoted

Each call has three outcomes. Network errors and malformed bodies raise
``TransportFailure``; a well-formed body with a non-200 ``code`` is returned
as a ``Rejection``; anything else is decoded into the endpoint's success
model. Only the ``code`` field decides success; the HTTP status line is
ignored because error bodies are still sent with it.
"""

from collections.abc import Iterable
from typing import TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from tenkb_votes.core.config import Settings, get_settings
from tenkb_votes.core.errors import TransportFailure
from tenkb_votes.core.logging import short_id
from tenkb_votes.schemas.vote import (
    IdentityIssued,
    Rejection,
    ResponseEnvelope,
    VoteAccepted,
    VotesFetched,
    VoteValue,
    parse_vote,
)

logger = structlog.get_logger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)


class VoteClient:
    """
    Async client for the voting endpoints.

    Pass ``http_client`` to share a connection pool or to drive an
    in-process app; otherwise the client owns its own ``httpx.AsyncClient``
    and closes it in ``aclose()``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=self.settings.BASE_URL,
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
        )

    async def __aenter__(self) -> "VoteClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def issue_identity(self) -> IdentityIssued | Rejection:
        """Ask the server to mint a new voter id."""
        result = await self._post(self.settings.ID_PATH, None, IdentityIssued)
        if isinstance(result, IdentityIssued):
            logger.debug("voter_id_received", voter_id=short_id(result.voter_id))
        return result

    async def cast_vote(
        self,
        site_id: str,
        voter_id: str,
        vote: VoteValue | int,
    ) -> VoteAccepted | Rejection:
        """
        Add or remove this voter's vote for a site.

        Raises:
            LocalValidationError: if ``vote`` is not 0 or 1 (nothing is sent)
            TransportFailure: on network errors or malformed bodies
        """
        value = parse_vote(vote)
        logger.debug(
            "casting_vote",
            site_id=site_id,
            voter_id=short_id(voter_id),
            vote=int(value),
        )
        form = {
            "site_id": site_id,
            "voter_id": voter_id,
            "vote": str(int(value)),
        }
        return await self._post(self.settings.VOTE_PATH, form, VoteAccepted)

    async def fetch_votes(
        self,
        site_ids: Iterable[str],
        voter_id: str | None,
    ) -> VotesFetched | Rejection:
        """
        Fetch which of ``site_ids`` the voter has already upvoted.

        An absent voter id is sent as an empty string; the server answers
        with no votes for it.
        """
        ids = list(site_ids)
        form = {
            "site_ids": ",".join(ids),
            "voter_id": voter_id or "",
        }
        logger.debug("fetching_votes", count=len(ids), voter_id=short_id(voter_id))
        return await self._post(self.settings.VOTES_PATH, form, VotesFetched)

    async def _post(
        self,
        path: str,
        form: dict[str, str] | None,
        model: type[ResultT],
    ) -> ResultT | Rejection:
        try:
            response = await self._client.post(path, data=form)
        except httpx.HTTPError as e:
            logger.warning("request_failed", path=path, error=str(e), error_type=type(e).__name__)
            raise TransportFailure(str(e) or type(e).__name__) from e

        return self._decode(path, response, model)

    def _decode(
        self,
        path: str,
        response: httpx.Response,
        model: type[ResultT],
    ) -> ResultT | Rejection:
        try:
            body = response.json()
        except ValueError as e:
            logger.warning("malformed_response", path=path, http_status=response.status_code)
            raise TransportFailure(f"malformed response body (HTTP {response.status_code})") from e

        if not isinstance(body, dict):
            raise TransportFailure(f"malformed response body (HTTP {response.status_code})")

        try:
            envelope = ResponseEnvelope.model_validate(body)
        except ValidationError as e:
            raise TransportFailure(f"malformed response body: {e.error_count()} invalid field(s)") from e

        if not envelope.is_success:
            status = envelope.status or f"HTTP {response.status_code}"
            logger.info("request_rejected", path=path, code=envelope.code, status=status)
            return Rejection(code=envelope.code, status=status)

        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise TransportFailure(f"malformed response body: {e.error_count()} invalid field(s)") from e
