"""Boundary adapter exposing a roster to a host that only speaks numbers and bytes.

Every text value crosses as a pair of calls: ``*_ptr`` copies the bytes into
a buffer table and returns an integer handle, ``*_len`` returns the byte
length. The host then calls ``read(handle, length)`` to copy the bytes out.

Handles stay valid until the next append, update or delete on the store.
After that the whole table is dropped and reading an old handle raises
StaleBufferError. Handles are never reused, so a stale handle cannot alias
a newer buffer. Only the most recent rejection reason is kept.
"""

from collections.abc import Callable

from aws_lambda_powertools import Logger

from roster.store import RosterStore
from shared.exceptions import BoundaryError, DecodeError, StaleBufferError

logger = Logger(child=True)

NULL_HANDLE = 0
OK = 0
MALFORMED = 1


class RosterBoundary:
    """Handle/length query surface over a RosterStore."""

    def __init__(self, store: RosterStore) -> None:
        """Wrap a store.

        Args:
            store: The store to expose; the boundary does not own it
        """
        self.store = store
        self._buffers: dict[int, bytes] = {}
        self._handles: dict[tuple, int] = {}
        self._next_handle = 1
        self._generation = store.generation
        self._last_error = b""

    def _sync(self) -> None:
        """Drop every buffer if the store mutated since they were issued."""
        if self._generation != self.store.generation:
            if self._buffers:
                logger.debug(
                    "Invalidating boundary buffers",
                    extra={"buffers": len(self._buffers)},
                )
            self._buffers.clear()
            self._handles.clear()
            self._generation = self.store.generation

    def _publish(self, key: tuple, produce: Callable[[], bytes]) -> int:
        self._sync()
        handle = self._handles.get(key)
        if handle is None:
            buffer = produce()
            handle = self._next_handle
            self._next_handle += 1
            self._buffers[handle] = buffer
            self._handles[key] = handle
        return handle

    def read(self, handle: int, length: int) -> bytes:
        """Copy bytes out of a published buffer.

        Args:
            handle: Value returned by a ``*_ptr`` call
            length: Number of bytes to copy, from the start of the buffer

        Returns:
            A copy of the first ``length`` bytes

        Raises:
            StaleBufferError: If the handle is unknown or was invalidated
            BoundaryError: If ``length`` is negative or exceeds the buffer
        """
        self._sync()
        buffer = self._buffers.get(handle)
        if buffer is None:
            raise StaleBufferError(handle)
        if not 0 <= length <= len(buffer):
            raise BoundaryError(
                f"Read of {length} bytes from handle {handle} "
                f"exceeds buffer of {len(buffer)}"
            )
        return buffer[:length]

    # Scalars

    def count(self) -> int:
        return self.store.count()

    def health(self, index: int) -> int:
        return self.store.health(index)

    def attack(self, index: int) -> int:
        return self.store.attack(index)

    def defense(self, index: int) -> int:
        return self.store.defense(index)

    def will(self, index: int) -> int:
        return self.store.will(index)

    def speed(self, index: int) -> int:
        return self.store.speed(index)

    def is_flying(self, index: int) -> int:
        return int(self.store.is_flying(index))

    def attack_count(self, index: int) -> int:
        return self.store.attack_count(index)

    def companion_count(self, index: int) -> int:
        return self.store.companion_count(index)

    def has_pending_changes(self) -> int:
        return int(self.store.has_pending_changes)

    # Text fields

    def _text_ptr(self, index: int, field: str) -> int:
        return self._publish((field, index), lambda: self.store.text_bytes(index, field))

    def name_ptr(self, index: int) -> int:
        return self._text_ptr(index, "name")

    def name_len(self, index: int) -> int:
        return len(self.store.text_bytes(index, "name"))

    def subclass_ptr(self, index: int) -> int:
        return self._text_ptr(index, "subclass")

    def subclass_len(self, index: int) -> int:
        return len(self.store.text_bytes(index, "subclass"))

    def description_ptr(self, index: int) -> int:
        return self._text_ptr(index, "description")

    def description_len(self, index: int) -> int:
        return len(self.store.text_bytes(index, "description"))

    def attacks_ptr(self, index: int) -> int:
        return self._publish(("attacks", index), lambda: self.store.attacks_blob(index))

    def attacks_len(self, index: int) -> int:
        return len(self.store.attacks_blob(index))

    def record_ptr(self, index: int) -> int:
        return self._publish(
            ("record", index), lambda: self.store.record_json(index).encode("utf-8")
        )

    def record_len(self, index: int) -> int:
        return len(self.store.record_json(index).encode("utf-8"))

    # Roster-wide buffers

    def name_index_ptr(self) -> int:
        return self._publish(("name_index",), self.store.name_index)

    def name_index_len(self) -> int:
        return len(self.store.name_index())

    def roster_ptr(self) -> int:
        return self._publish(("roster",), lambda: self.store.serialize().encode("utf-8"))

    def roster_len(self) -> int:
        return len(self.store.serialize().encode("utf-8"))

    def last_error_ptr(self) -> int:
        """Handle to the reason of the most recent rejected append or update (empty if none)."""
        if not self._last_error:
            return NULL_HANDLE
        return self._publish(("last_error",), lambda: self._last_error)

    def last_error_len(self) -> int:
        return len(self._last_error)

    # Mutators

    def _reject(self, reason: str) -> int:
        """Record a rejection reason, replacing any earlier one."""
        self._clear_last_error()
        self._last_error = reason.encode("utf-8")
        return MALFORMED

    def _clear_last_error(self) -> None:
        handle = self._handles.pop(("last_error",), None)
        if handle is not None:
            self._buffers.pop(handle, None)
        self._last_error = b""

    def append(self, json_text: str) -> int:
        """Append one record.

        Returns:
            OK on success, MALFORMED if the record was rejected
        """
        try:
            self.store.append(json_text)
        except DecodeError as e:
            logger.warning("Rejected appended character", extra={"reason": e.reason})
            return self._reject(e.reason)
        self._clear_last_error()
        return OK

    def update(self, index: int, json_text: str) -> int:
        """Replace the record at ``index``.

        Returns:
            OK on success, MALFORMED if the record was rejected

        Raises:
            IndexOutOfRangeError: If ``index`` is not in ``[0, count)``
        """
        try:
            self.store.update(index, json_text)
        except DecodeError as e:
            logger.warning(
                "Rejected updated character",
                extra={"index": index, "reason": e.reason},
            )
            return self._reject(e.reason)
        self._clear_last_error()
        return OK

    def delete(self, index: int) -> int:
        """Delete the record at ``index``; returns 1 if removed, 0 if ignored."""
        return int(self.store.delete(index))

    def mark_submitted(self) -> None:
        self.store.mark_submitted()
