"""Backoff computation for the retry engine.

Exponential backoff capped at ``max_backoff``, with an optional symmetric
+/-20% jitter drawn from an injectable random source. The default source is
``random.SystemRandom`` (OS CSPRNG): independent processes never share a seed,
so their retries do not line up into synchronized bursts.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional, Protocol

from tenacity import RetryCallState
from tenacity.wait import wait_base

from confluent_rest.domain.config.retry import RetryConfig
from confluent_rest.domain.models.api_error import ApiError

logger = logging.getLogger(__name__)

JITTER_FRACTION = 0.2

_SYSTEM_RANDOM = random.SystemRandom()


class RandomSource(Protocol):
    def random(self) -> float:
        ...


def calculate_backoff(
    retries_so_far: int,
    config: RetryConfig,
    rng: Optional[RandomSource] = None,
) -> float:
    """Compute the wait before the next attempt.

    Args:
        retries_so_far: Retries already performed (0 before the second attempt)
        config: Retry configuration
        rng: Random source with a ``random()`` method returning [0, 1)

    Returns:
        Wait in seconds, never negative
    """
    ceiling = config.max_backoff
    if config.initial_backoff == 0:
        raw = 0.0
    else:
        try:
            raw = config.initial_backoff * math.pow(config.multiplier, max(retries_so_far, 0))
        except OverflowError:
            raw = ceiling
    raw = min(max(raw, 0.0), ceiling)

    if not config.jitter:
        return raw

    r = (rng or _SYSTEM_RANDOM).random()
    jittered = raw + raw * JITTER_FRACTION * (2 * r - 1)
    return max(jittered, 0.0)


def server_retry_after(error: Optional[BaseException]) -> Optional[float]:
    """Return the server's Retry-After hint when it should override backoff"""
    if not isinstance(error, ApiError) or not error.is_rate_limited:
        return None
    hint = error.retry_after
    if hint is None or hint <= 0:
        return None
    return hint


class wait_retry_after_or_backoff(wait_base):
    """Wait strategy honouring Retry-After on 429, else exponential backoff."""

    def __init__(self, config: RetryConfig, rng: Optional[RandomSource] = None) -> None:
        self.config = config
        self.rng = rng

    def __call__(self, retry_state: RetryCallState) -> float:
        error = None
        if retry_state.outcome is not None and retry_state.outcome.failed:
            error = retry_state.outcome.exception()

        hint = server_retry_after(error)
        if hint is not None:
            logger.debug(f"Using server Retry-After hint of {hint:.2f}s")
            return hint
        return calculate_backoff(retry_state.attempt_number - 1, self.config, self.rng)
