r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import random

from duneresilient.backoff.base import BaseBackoffStrategy
from duneresilient.validation import validate_backoff_params


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy with a hard cap and additive jitter.

    The delay starts at ``initial_backoff`` and doubles once per previous
    attempt. As soon as a doubling would exceed ``max_backoff`` the delay is
    clamped and the doubling stops. ``jitter`` is then added to the clamped
    value, so the largest possible delay is ``max_backoff + jitter``.

    Args:
        initial_backoff: Delay after the first attempt, in seconds. Must be > 0.
        max_backoff: Cap of the doubled delay, in seconds.
            Must be >= initial_backoff.
        jitter: Amount added to every delay, in seconds. Must be >= 0.
        randomize_jitter: If ``True``, a value drawn uniformly from
            ``[0, jitter]`` is added instead of the full ``jitter``.

    Example:
        ```pycon
        >>> from duneresilient.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(initial_backoff=2.0, max_backoff=60.0)
        >>> [backoff.calculate(attempt) for attempt in range(1, 7)]
        [2.0, 4.0, 8.0, 16.0, 32.0, 60.0]
        >>> backoff = ExponentialBackoff(initial_backoff=2.0, max_backoff=60.0, jitter=0.25)
        >>> backoff.calculate(1)
        2.25

        ```
    """

    def __init__(
        self,
        initial_backoff: float,
        max_backoff: float,
        jitter: float = 0.0,
        randomize_jitter: bool = False,
    ) -> None:
        validate_backoff_params(
            initial_backoff=initial_backoff, max_backoff=max_backoff, jitter=jitter
        )
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self.jitter = jitter
        self.randomize_jitter = randomize_jitter

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(initial_backoff={self.initial_backoff}, "
            f"max_backoff={self.max_backoff}, jitter={self.jitter}, "
            f"randomize_jitter={self.randomize_jitter})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate the exponential backoff delay.

        Args:
            attempt: The number of the attempt that just failed (1-indexed).

        Returns:
            The doubled and clamped delay plus the jitter.

        Raises:
            ValueError: If ``attempt`` is lower than 1.
        """
        if attempt < 1:
            msg = f"attempt must be >= 1, got {attempt}"
            raise ValueError(msg)

        delay = self.initial_backoff
        for _ in range(1, attempt):
            delay *= 2
            if delay > self.max_backoff:
                delay = self.max_backoff
                break

        if self.jitter > 0:
            if self.randomize_jitter:
                delay += random.uniform(0, self.jitter)  # noqa: S311
            else:
                delay += self.jitter
        return delay
