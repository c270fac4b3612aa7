"""
Pytest fixtures for the voting client tests.

``FakeVoteServer`` is an in-process FastAPI app that speaks the same wire
protocol as the 10kbclub server (``/id/``, ``/vote/``, ``/votes/``). Tests
drive it through ``httpx.ASGITransport`` so every request is a real HTTP
exchange without a socket.
"""

from collections.abc import AsyncGenerator
from itertools import count
from pathlib import Path

import pytest
from fastapi import FastAPI, Form
from fastapi.responses import JSONResponse, PlainTextResponse
from httpx import ASGITransport, AsyncClient

from tenkb_votes.core.config import Settings
from tenkb_votes.page import VotePage, create_page
from tenkb_votes.repositories.local_storage import InMemoryLocalStorage
from tenkb_votes.services.notification_service import CollectingNotifier
from tenkb_votes.services.vote_client import VoteClient


class FakeVoteServer:
    """
    Minimal stand-in for the voting server.

    Attributes:
        voters: voter ids that have been issued
        votes: (voter_id, site_id) pairs currently upvoted
        calls: request paths in arrival order
        failures: path -> (code, status) to answer with instead
        malformed: paths that answer with a non-JSON body
    """

    def __init__(self):
        self.voters: set[str] = set()
        self.votes: set[tuple[str, str]] = set()
        self.calls: list[str] = []
        self.failures: dict[str, tuple[int, str]] = {}
        self.malformed: set[str] = set()
        self.last_forms: dict[str, dict[str, str]] = {}
        self._ids = count(123)
        self.app = self._build_app()

    def add_voter(self, voter_id: str, upvoted: tuple[str, ...] = ()) -> None:
        self.voters.add(voter_id)
        for site_id in upvoted:
            self.votes.add((voter_id, site_id))

    def count_calls(self, path: str) -> int:
        return self.calls.count(path)

    def _intercept(self, path: str):
        self.calls.append(path)
        if path in self.malformed:
            return PlainTextResponse("<html>Bad Gateway</html>", status_code=502)
        if path in self.failures:
            code, status = self.failures[path]
            return JSONResponse({"code": code, "status": status}, status_code=code)
        return None

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.post("/id/")
        async def issue_id():
            if (response := self._intercept("/id/")) is not None:
                return response
            voter_id = f"v-{next(self._ids)}"
            self.voters.add(voter_id)
            return {"code": 200, "status": "OK", "voter_id": voter_id}

        @app.post("/vote/")
        async def vote(
            site_id: str = Form(...),
            voter_id: str = Form(...),
            vote: int = Form(...),
        ):
            self.last_forms["/vote/"] = {"site_id": site_id, "voter_id": voter_id, "vote": str(vote)}
            if (response := self._intercept("/vote/")) is not None:
                return response
            if vote not in (0, 1):
                return JSONResponse({"code": 500, "status": "invalid vote"}, status_code=500)
            if voter_id not in self.voters:
                return JSONResponse(
                    {"code": 500, "status": "NOT NULL constraint failed: votes.voter_id"},
                    status_code=500,
                )
            if vote == 1:
                self.votes.add((voter_id, site_id))
            else:
                self.votes.discard((voter_id, site_id))
            return {"code": 200, "status": "OK"}

        @app.post("/votes/")
        async def votes(site_ids: str = Form(""), voter_id: str = Form("")):
            self.last_forms["/votes/"] = {"site_ids": site_ids, "voter_id": voter_id}
            if (response := self._intercept("/votes/")) is not None:
                return response
            requested = [s for s in site_ids.split(",") if s]
            upvoted = [s for s in requested if (voter_id, s) in self.votes]
            # The real server stores site ids as integers
            return {
                "code": 200,
                "status": "OK",
                "site_ids": [int(s) if s.isdigit() else s for s in upvoted],
            }

        return app


@pytest.fixture
def server() -> FakeVoteServer:
    """Fresh fake server per test."""
    return FakeVoteServer()


@pytest.fixture
async def http_client(server: FakeVoteServer) -> AsyncGenerator[AsyncClient, None]:
    """httpx client wired to the fake server."""
    async with AsyncClient(
        transport=ASGITransport(app=server.app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at the fake server and a temporary profile."""
    return Settings(
        BASE_URL="http://test",
        STORAGE_PATH=tmp_path / "local_storage.json",
        LOG_LEVEL="DEBUG",
        _env_file=None,
    )


@pytest.fixture
def storage() -> InMemoryLocalStorage:
    return InMemoryLocalStorage()


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def vote_client(settings: Settings, http_client: AsyncClient) -> VoteClient:
    return VoteClient(settings, http_client=http_client)


@pytest.fixture
def page(
    settings: Settings,
    storage: InMemoryLocalStorage,
    notifier: CollectingNotifier,
    http_client: AsyncClient,
) -> VotePage:
    """A fully wired page talking to the fake server."""
    return create_page(settings, storage=storage, notifier=notifier, http_client=http_client)
