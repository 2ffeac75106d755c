"""Roster service - owns a store and persists it through the document table."""

from aws_lambda_powertools import Logger

from roster.seed import read_seed_document
from roster.store import RosterStore
from shared.config import RosterOptions
from shared.db import RosterTable
from shared.models import Character

logger = Logger()


class RosterService:
    """Host-side owner of one RosterStore.

    The store itself never touches storage. This service loads the initial
    document (stored copy first, bundled seed otherwise) and writes the
    serialized roster back on submit.
    """

    def __init__(
        self,
        table: RosterTable,
        roster_id: str,
        options: RosterOptions | None = None,
    ) -> None:
        """Initialize roster service and load the roster.

        Args:
            table: Document table used for load and submit
            roster_id: Which stored roster to use
            options: Capability switches for the store

        Raises:
            RosterLoadError: If the stored or bundled document is malformed
        """
        self.table = table
        self.roster_id = roster_id
        self.options = options or RosterOptions()
        self.store = self._load()

    def _load(self) -> RosterStore:
        document = self.table.load_document(self.roster_id)
        source = "table"
        if document is None:
            document = read_seed_document()
            source = "seed"
        store = RosterStore.from_json(document, self.options)
        logger.info(
            "Roster loaded",
            extra={"roster_id": self.roster_id, "source": source, "count": len(store)},
        )
        return store

    def list_characters(self, query: str | None = None, subclass: str | None = None) -> dict:
        """Summary of the roster for listing.

        Args:
            query: Optional case-insensitive name substring
            subclass: Optional exact subclass to match

        Returns:
            Dict with count, names in roster order, the pending flag, the
            distinct subclasses and the records matching the filters
        """
        needle = query.lower() if query else ""
        matches = [
            {"index": index, "name": character.name, "subclass": character.subclass}
            for index, character in enumerate(self.store)
            if needle in character.name.lower()
            and (not subclass or character.subclass == subclass)
        ]
        return {
            "count": self.store.count(),
            "names": self.store.names(),
            "has_pending_changes": self.store.has_pending_changes,
            "subclasses": sorted({c.subclass for c in self.store if c.subclass}),
            "matches": matches,
        }

    def get_character(self, index: int) -> dict:
        """Get full character details.

        Raises:
            IndexOutOfRangeError: If no record exists at ``index``
        """
        character: Character = self.store.get(index)
        exclude = None if self.options.companions else {"companions"}
        return character.model_dump(exclude=exclude)

    def add_character(self, json_text: str) -> dict:
        """Append a character from JSON text.

        Raises:
            DecodeError: If the record is malformed
        """
        self.store.append(json_text)
        return {
            "count": self.store.count(),
            "has_pending_changes": self.store.has_pending_changes,
        }

    def update_character(self, index: int, json_text: str) -> dict:
        """Replace the character at ``index`` from JSON text.

        Raises:
            IndexOutOfRangeError: If no record exists at ``index``
            DecodeError: If the record is malformed
        """
        self.store.update(index, json_text)
        return {
            "count": self.store.count(),
            "has_pending_changes": self.store.has_pending_changes,
        }

    def delete_character(self, index: int) -> bool:
        """Delete a character; False when the index is out of range."""
        return self.store.delete(index)

    def preview(self) -> str:
        """Serialized roster as it would be submitted."""
        return self.store.serialize()

    def submit(self) -> dict:
        """Persist the serialized roster and clear the pending flag.

        Returns:
            Dict with the submitted record count
        """
        document = self.store.serialize()
        self.table.save_document(self.roster_id, document, self.store.count())
        self.store.mark_submitted()

        logger.info(
            "Roster submitted",
            extra={"roster_id": self.roster_id, "count": self.store.count()},
        )
        return {"count": self.store.count(), "submitted": True}
