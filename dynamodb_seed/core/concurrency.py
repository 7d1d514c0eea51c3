"""Fan-out/fan-in helper for independent async units."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Mapping, TypeVar

from dynamodb_seed.exceptions import AggregateFailureError

T = TypeVar("T")


async def gather_settled(
    units: Mapping[str, Awaitable[T]],
    error_factory: Callable[[dict[str, BaseException]], AggregateFailureError],
) -> dict[str, T]:
    """
    Run independent units concurrently and wait for all of them.

    A failing unit never cancels its siblings. Once every unit has settled,
    all failures are raised together through ``error_factory``.

    Args:
        units: Unit name → awaitable (table name, seed source label, ...)
        error_factory: Builds the aggregate error from name → exception,
            in submission order

    Returns:
        Unit name → result, for all units, when none failed

    Raises:
        AggregateFailureError: If at least one unit failed
    """
    names = list(units)
    results = await asyncio.gather(*units.values(), return_exceptions=True)

    failures: dict[str, BaseException] = {}
    settled: dict[str, T] = {}
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            failures[name] = result
        else:
            settled[name] = result

    if failures:
        raise error_factory(failures)
    return settled
