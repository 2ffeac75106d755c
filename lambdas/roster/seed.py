"""Bundled seed roster shipped with the package."""

from importlib import resources

from roster.store import RosterStore
from shared.config import RosterOptions

SEED_RESOURCE = "lw.json"


def read_seed_document() -> str:
    """Read the bundled roster document as text."""
    return resources.files("roster").joinpath("data", SEED_RESOURCE).read_text(encoding="utf-8")


def from_seed(options: RosterOptions | None = None) -> RosterStore:
    """Construct a store from the bundled roster document.

    Raises:
        RosterLoadError: If the bundled document is malformed
    """
    return RosterStore.from_json(read_seed_document(), options)
