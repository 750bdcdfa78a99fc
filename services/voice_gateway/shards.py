"""Shard count sources for the voice gateway adapter."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ExplicitShardCount:
    """A shard count fixed at construction time (1 for unsharded clients)."""

    count: int

    def resolve(self) -> int:
        return self.count


@dataclass(frozen=True, slots=True)
class DynamicShardCount:
    """A shard count read from the live client on every access.

    ``query`` returns ``None`` while the client's session view is not
    populated yet.
    """

    query: Callable[[], int | None]

    def resolve(self) -> int | None:
        return self.query()


ShardCountSource = ExplicitShardCount | DynamicShardCount
