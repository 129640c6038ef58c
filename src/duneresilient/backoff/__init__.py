r"""Backoff strategies for retry delays."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from duneresilient.backoff.base import BaseBackoffStrategy
from duneresilient.backoff.exponential import ExponentialBackoff
