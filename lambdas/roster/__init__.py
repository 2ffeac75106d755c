"""LW roster store and its boundary adapter."""

from roster.boundary import RosterBoundary
from roster.seed import from_seed
from roster.store import RosterStore

__all__ = ["RosterBoundary", "RosterStore", "from_seed"]
