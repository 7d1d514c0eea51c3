"""Tests for stage gating and the fan-out helper."""

import asyncio

import pytest

from dynamodb_seed.core.concurrency import gather_settled
from dynamodb_seed.core.stage import should_execute, skip_message
from dynamodb_seed.exceptions import AggregateFailureError


class TestShouldExecute:
    """Tests for should_execute()."""

    def test_no_configured_stages(self) -> None:
        assert should_execute("prod", None) is True

    def test_empty_configured_stages(self) -> None:
        assert should_execute("prod", []) is True

    def test_stage_listed(self) -> None:
        assert should_execute("dev", ["dev", "test"]) is True

    def test_stage_not_listed(self) -> None:
        assert should_execute("prod", ["dev"]) is False

    def test_skip_message(self) -> None:
        assert skip_message("migration", "prod") == (
            "Skipping migration: DynamoDB Local is not available for stage: prod"
        )


class TestGatherSettled:
    """Tests for gather_settled()."""

    @pytest.mark.asyncio
    async def test_returns_all_results(self) -> None:
        async def value(v):
            return v

        results = await gather_settled({"a": value(1), "b": value(2)}, AggregateFailureError)

        assert results == {"a": 1, "b": 2}

    @pytest.mark.asyncio
    async def test_failure_waits_for_slow_siblings(self) -> None:
        """A fast failure does not cut a slow sibling short."""
        finished = []

        async def fail():
            raise ValueError("boom")

        async def slow():
            await asyncio.sleep(0.01)
            finished.append("slow")
            return "done"

        with pytest.raises(AggregateFailureError) as exc_info:
            await gather_settled(
                {"fail": fail(), "slow": slow()},
                lambda failures: AggregateFailureError("Test", failures),
            )

        assert finished == ["slow"]
        assert list(exc_info.value.failures) == ["fail"]
        assert "Test failed for 1 unit(s)" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_empty_units(self) -> None:
        assert await gather_settled({}, AggregateFailureError) == {}
