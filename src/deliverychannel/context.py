"""Per-channel state carried between reconciliation calls."""

from __future__ import annotations


class Context:
    """Identity of the managed channel, persisted by the caller between calls.

    An empty identity means the channel does not exist (or was never created).
    """

    def __init__(self, identity: str = "", *, dry_run: bool = False) -> None:
        self.identity = identity
        self.dry_run = dry_run

    def __repr__(self) -> str:
        return f"Context(identity={self.identity!r}, dry_run={self.dry_run})"
