"""
Tests for vote schemas.
"""

import pytest
from pydantic import ValidationError

from tenkb_votes.core.errors import ApplicationRejection, LocalValidationError
from tenkb_votes.schemas.vote import (
    IdentityIssued,
    Rejection,
    ResponseEnvelope,
    VotesFetched,
    VoteState,
    VoteValue,
    parse_vote,
)


@pytest.mark.unit
class TestParseVote:
    """Test local vote validation."""

    @pytest.mark.parametrize("value", [0, 1, VoteValue.ADD, VoteValue.REMOVE])
    def test_valid_votes(self, value) -> None:
        assert parse_vote(value) == VoteValue(int(value))

    @pytest.mark.parametrize("value", [-1, 2, 10, "1", None, 1.0, True])
    def test_invalid_votes(self, value) -> None:
        """Test that anything but the integers 0 and 1 is refused."""
        with pytest.raises(LocalValidationError) as exc_info:
            parse_vote(value)
        assert exc_info.value.message == "Invalid vote!"

    def test_resulting_state(self) -> None:
        assert VoteValue.ADD.resulting_state is VoteState.UPVOTED
        assert VoteValue.REMOVE.resulting_state is VoteState.UNVOTED


@pytest.mark.unit
class TestResponseModels:
    """Test decoding of response bodies."""

    def test_envelope_success_discriminator(self) -> None:
        assert ResponseEnvelope.model_validate({"code": 200}).is_success is True
        assert ResponseEnvelope.model_validate({"code": 201, "status": "Created"}).is_success is False
        assert ResponseEnvelope.model_validate({"code": 500, "status": "x"}).status == "x"
        assert ResponseEnvelope.model_validate({"code": 500, "status": None}).status is None

    def test_envelope_requires_code(self) -> None:
        with pytest.raises(ValidationError):
            ResponseEnvelope.model_validate({"status": "OK"})

    def test_identity_requires_non_empty_id(self) -> None:
        with pytest.raises(ValidationError):
            IdentityIssued.model_validate({"code": 200, "voter_id": ""})

    def test_votes_fetched_coerces_numeric_ids(self) -> None:
        """Test that numeric site ids become strings."""
        fetched = VotesFetched.model_validate({"code": 200, "site_ids": [12, "b2", 12]})
        assert fetched.site_ids == frozenset({"12", "b2"})

    def test_votes_fetched_requires_list(self) -> None:
        with pytest.raises(ValidationError):
            VotesFetched.model_validate({"code": 200})

    def test_rejection_to_error(self) -> None:
        error = Rejection(code=500, status="database is locked").to_error()
        assert isinstance(error, ApplicationRejection)
        assert error.code == 500
        assert error.status == "database is locked"
