"""Stage gating for every handler."""

from __future__ import annotations

from typing import Iterable, Optional


def should_execute(current_stage: Optional[str], configured_stages: Optional[Iterable[str]]) -> bool:
    """
    Check if DynamoDB Local handlers should run for the active stage.

    Args:
        current_stage: Active deployment stage (e.g. "dev")
        configured_stages: Stages DynamoDB Local is enabled for; empty or
            None enables every stage

    Returns:
        True if the handler should do its work
    """
    if not configured_stages:
        return True
    return current_stage in set(configured_stages)


def skip_message(action: str, stage: Optional[str]) -> str:
    """Build the skip notice logged when a handler is gated off."""
    return f"Skipping {action}: DynamoDB Local is not available for stage: {stage}"
