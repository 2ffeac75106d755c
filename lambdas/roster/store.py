"""Roster store - ordered character records plus a derived name index."""

from aws_lambda_powertools import Logger

from shared.codec import decode, decode_one, encode, encode_one
from shared.config import RosterOptions
from shared.exceptions import DecodeError, IndexOutOfRangeError, RosterLoadError
from shared.models import TEXT_FIELDS, Character

logger = Logger(child=True)

TERMINATOR = b"\x00"
EMPTY_ROSTER = "[]"


def flatten(values: list[str]) -> bytes:
    """Concatenate UTF-8 strings, each followed by a terminator byte."""
    return b"".join(value.encode("utf-8") + TERMINATOR for value in values)


class RosterStore:
    """Mutable, positionally indexed roster of characters.

    The name index is the concatenation of every record's name followed by
    a zero byte, in roster order. Appends extend it in place; updates and
    deletes rebuild it from scratch.

    A store is not thread-safe. Its owner serializes all access.
    """

    def __init__(
        self,
        characters: list[Character] | None = None,
        options: RosterOptions | None = None,
    ) -> None:
        """Take ownership of already-decoded characters.

        Args:
            characters: Initial records, in roster order
            options: Capability switches (companions, pending flag)
        """
        self.options = options or RosterOptions()
        self._characters: list[Character] = list(characters or [])
        self._name_index = bytearray(self._build_name_index())
        self._pending = False
        self._generation = 0

    @classmethod
    def from_json(cls, json_text: str, options: RosterOptions | None = None) -> "RosterStore":
        """Construct a store from a roster document.

        Args:
            json_text: JSON array of characters
            options: Capability switches

        Returns:
            A populated store with the pending flag cleared

        Raises:
            RosterLoadError: If the document cannot be decoded
        """
        options = options or RosterOptions()
        try:
            characters = decode(json_text, companions=options.companions)
        except DecodeError as e:
            logger.critical("Seed roster is malformed", extra={"reason": e.reason})
            raise RosterLoadError(e.reason) from None

        store = cls(characters, options)
        logger.info("Roster constructed", extra={"count": len(store)})
        return store

    def __len__(self) -> int:
        return len(self._characters)

    @property
    def generation(self) -> int:
        """Mutation counter; changes on every append, update or delete."""
        return self._generation

    @property
    def has_pending_changes(self) -> bool:
        """True when records were appended or updated since the last submit."""
        return self._pending

    def count(self) -> int:
        return len(self._characters)

    def _build_name_index(self) -> bytes:
        return flatten([character.name for character in self._characters])

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._characters):
            raise IndexOutOfRangeError(index, len(self._characters))

    # Mutations

    def append(self, json_text: str) -> Character:
        """Decode one record and add it to the end of the roster.

        Args:
            json_text: JSON object for a single character

        Returns:
            The appended Character

        Raises:
            DecodeError: If the record is malformed; the roster is unchanged
        """
        character = decode_one(json_text, companions=self.options.companions)

        self._characters.append(character)
        self._name_index += character.name.encode("utf-8") + TERMINATOR
        if self.options.track_pending:
            self._pending = True
        self._generation += 1

        logger.info(
            "Character appended",
            extra={"index": len(self._characters) - 1, "character_name": character.name},
        )
        return character

    def append_and_serialize(self, json_text: str) -> str:
        """Append one record, then return the whole roster as JSON.

        Raises:
            DecodeError: If the record is malformed; the roster is unchanged
        """
        self.append(json_text)
        return self.serialize()

    def update(self, index: int, json_text: str) -> Character:
        """Replace the record at ``index`` with a newly decoded one.

        Args:
            index: Roster position
            json_text: JSON object for a single character

        Returns:
            The new Character

        Raises:
            IndexOutOfRangeError: If ``index`` is not in ``[0, count)``
            DecodeError: If the record is malformed; the roster is unchanged
        """
        self._check_index(index)
        character = decode_one(json_text, companions=self.options.companions)

        previous = self._characters[index]
        self._characters[index] = character
        self._name_index = bytearray(self._build_name_index())
        if self.options.track_pending:
            self._pending = True
        self._generation += 1

        logger.info(
            "Character updated",
            extra={
                "index": index,
                "character_name": character.name,
                "previous_name": previous.name,
            },
        )
        return character

    def delete(self, index: int) -> bool:
        """Remove the record at ``index`` and shift later records down.

        Args:
            index: Roster position

        Returns:
            True if a record was removed, False if the index was out of range
        """
        if not 0 <= index < len(self._characters):
            logger.debug("Delete ignored", extra={"index": index, "count": len(self)})
            return False

        removed = self._characters.pop(index)
        self._name_index = bytearray(self._build_name_index())
        self._generation += 1

        logger.info(
            "Character deleted",
            extra={"index": index, "character_name": removed.name},
        )
        return True

    def mark_submitted(self) -> None:
        """Clear the pending-changes flag."""
        self._pending = False

    # Queries

    def get(self, index: int) -> Character:
        """Get the record at ``index``.

        Raises:
            IndexOutOfRangeError: If ``index`` is not in ``[0, count)``
        """
        self._check_index(index)
        return self._characters[index]

    def __iter__(self):
        return iter(list(self._characters))

    def health(self, index: int) -> int:
        return self.get(index).health

    def attack(self, index: int) -> int:
        return self.get(index).attack

    def defense(self, index: int) -> int:
        return self.get(index).defense

    def will(self, index: int) -> int:
        return self.get(index).will

    def speed(self, index: int) -> int:
        return self.get(index).speed

    def is_flying(self, index: int) -> bool:
        return self.get(index).is_flying

    def name(self, index: int) -> str:
        return self.get(index).name

    def subclass(self, index: int) -> str:
        return self.get(index).subclass

    def description(self, index: int) -> str:
        return self.get(index).description

    def text_bytes(self, index: int, field: str) -> bytes:
        """Get a text field (name, subclass or description) as UTF-8 bytes."""
        if field not in TEXT_FIELDS:
            raise ValueError(f"Unknown text field: {field}")
        return getattr(self.get(index), field).encode("utf-8")

    def attacks(self, index: int) -> list[str]:
        return list(self.get(index).attacks)

    def attack_count(self, index: int) -> int:
        return len(self.get(index).attacks)

    def attacks_blob(self, index: int) -> bytes:
        """Flatten a record's attack list into terminator-separated bytes.

        Computed on every call; nothing is cached.
        """
        return flatten(self.get(index).attacks)

    def companion_count(self, index: int) -> int:
        return self.get(index).companion_count

    def name_index(self) -> bytes:
        """Snapshot of the name index."""
        return bytes(self._name_index)

    def names(self) -> list[str]:
        """Names in roster order."""
        return [character.name for character in self._characters]

    def record_json(self, index: int) -> str:
        """Encode a single record as pretty JSON."""
        return encode_one(self.get(index), companions=self.options.companions)

    def serialize(self) -> str:
        """Encode the whole roster as pretty JSON for the caller to persist.

        Returns:
            JSON array text, or ``"[]"`` if encoding fails
        """
        try:
            return encode(self._characters, companions=self.options.companions)
        except (ValueError, TypeError) as e:
            logger.exception("Failed to serialize roster", extra={"error": str(e)})
            return EMPTY_ROSTER
