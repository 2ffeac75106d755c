"""Tests for the roster boundary adapter."""

import json

import pytest

from roster.boundary import MALFORMED, NULL_HANDLE, OK, RosterBoundary
from roster.store import RosterStore
from shared.exceptions import BoundaryError, IndexOutOfRangeError, StaleBufferError

from conftest import character_json, make_character, roster_json


@pytest.fixture
def boundary():
    """A boundary over a two-character store."""
    document = json.dumps(
        [
            make_character("Archer", subclass="Ranger", attacks=["Shot - 5", "Stab - 2"]),
            make_character("Bat", is_flying=True, description="", attacks=[]),
        ]
    )
    return RosterBoundary(RosterStore.from_json(document))


def read_text(boundary: RosterBoundary, ptr: int, length: int) -> str:
    """Copy a buffer out the way a host would."""
    return boundary.read(ptr, length).decode("utf-8")


class TestQueries:
    """Tests for scalar and buffer queries."""

    def test_scalars(self, boundary):
        """Numbers cross the boundary unchanged."""
        assert boundary.count() == 2
        assert boundary.health(0) == 25
        assert boundary.attack(0) == 6
        assert boundary.defense(0) == 4
        assert boundary.will(0) == 8
        assert boundary.speed(0) == 7
        assert boundary.is_flying(0) == 0
        assert boundary.is_flying(1) == 1
        assert boundary.attack_count(0) == 2
        assert boundary.companion_count(0) == 0

    def test_text_fields(self, boundary):
        """Text comes back as handle plus length."""
        assert read_text(boundary, boundary.name_ptr(0), boundary.name_len(0)) == "Archer"
        assert (
            read_text(boundary, boundary.subclass_ptr(0), boundary.subclass_len(0))
            == "Ranger"
        )
        assert boundary.description_len(1) == 0
        assert boundary.read(boundary.description_ptr(1), 0) == b""

    def test_handles_are_nonzero_and_stable(self, boundary):
        """The same query within one generation yields the same handle."""
        ptr = boundary.name_ptr(0)
        assert ptr != NULL_HANDLE
        assert boundary.name_ptr(0) == ptr
        assert boundary.name_ptr(1) != ptr

    def test_attacks_blob(self, boundary):
        """Attack lists cross as a terminator-separated blob."""
        blob = boundary.read(boundary.attacks_ptr(0), boundary.attacks_len(0))
        assert blob == b"Shot - 5\x00Stab - 2\x00"
        assert boundary.attacks_len(1) == 0

    def test_name_index(self, boundary):
        """The roster-wide name list is one blob."""
        blob = boundary.read(boundary.name_index_ptr(), boundary.name_index_len())
        assert blob == b"Archer\x00Bat\x00"

    def test_record_and_roster_json(self, boundary):
        """Whole records and the whole roster are available as JSON bytes."""
        record = json.loads(read_text(boundary, boundary.record_ptr(1), boundary.record_len(1)))
        assert record["name"] == "Bat"
        roster = json.loads(read_text(boundary, boundary.roster_ptr(), boundary.roster_len()))
        assert [r["name"] for r in roster] == ["Archer", "Bat"]

    def test_partial_read(self, boundary):
        """Reads copy a prefix of the buffer."""
        assert boundary.read(boundary.name_ptr(0), 3) == b"Arc"

    def test_read_past_end(self, boundary):
        """Asking for more bytes than exist is a boundary error."""
        ptr = boundary.name_ptr(0)
        with pytest.raises(BoundaryError):
            boundary.read(ptr, boundary.name_len(0) + 1)
        with pytest.raises(BoundaryError):
            boundary.read(ptr, -1)

    def test_read_unknown_handle(self, boundary):
        """Handles that were never issued are rejected."""
        with pytest.raises(StaleBufferError):
            boundary.read(999, 0)

    def test_out_of_range_index(self, boundary):
        """Getters past the end fail like the store does."""
        with pytest.raises(IndexOutOfRangeError):
            boundary.name_ptr(2)
        with pytest.raises(IndexOutOfRangeError):
            boundary.health(2)


class TestInvalidation:
    """Tests for buffer lifetime across mutations."""

    def test_append_invalidates_handles(self, boundary):
        """Buffers from before an append cannot be read after it."""
        ptr = boundary.name_index_ptr()
        length = boundary.name_index_len()

        assert boundary.append(character_json("Cleric")) == OK

        with pytest.raises(StaleBufferError):
            boundary.read(ptr, length)

        new_ptr = boundary.name_index_ptr()
        assert new_ptr != ptr
        assert boundary.read(new_ptr, boundary.name_index_len()) == b"Archer\x00Bat\x00Cleric\x00"

    def test_delete_invalidates_handles(self, boundary):
        """Buffers from before a delete cannot be read after it."""
        ptr = boundary.name_ptr(1)

        assert boundary.delete(0) == 1

        with pytest.raises(StaleBufferError):
            boundary.read(ptr, 3)
        assert read_text(boundary, boundary.name_ptr(0), boundary.name_len(0)) == "Bat"

    def test_noop_delete_keeps_handles(self, boundary):
        """An ignored delete leaves buffers valid."""
        ptr = boundary.name_ptr(0)
        assert boundary.delete(5) == 0
        assert boundary.read(ptr, 6) == b"Archer"

    def test_update_invalidates_handles(self, boundary):
        """Buffers from before an update cannot be read after it."""
        ptr = boundary.name_index_ptr()
        length = boundary.name_index_len()

        assert boundary.update(0, character_json("Cleric")) == OK

        with pytest.raises(StaleBufferError):
            boundary.read(ptr, length)
        blob = boundary.read(boundary.name_index_ptr(), boundary.name_index_len())
        assert blob == b"Cleric\x00Bat\x00"

    def test_rejected_update_keeps_handles(self, boundary):
        """A malformed update is not a mutation."""
        ptr = boundary.name_ptr(0)
        assert boundary.update(0, "{broken") == MALFORMED
        assert boundary.read(ptr, 6) == b"Archer"

    def test_copied_bytes_survive_mutation(self, boundary):
        """Data copied out before a mutation stays intact."""
        copied = boundary.read(boundary.name_ptr(0), boundary.name_len(0))
        boundary.delete(0)
        assert copied == b"Archer"

    def test_direct_store_mutation_invalidates(self, boundary):
        """Mutating the store directly also invalidates handles."""
        ptr = boundary.name_ptr(0)
        boundary.store.append(character_json("Direct"))
        with pytest.raises(StaleBufferError):
            boundary.read(ptr, 6)


class TestMutators:
    """Tests for append, update, delete and submit through the boundary."""

    def test_append_malformed_reports_reason(self, boundary):
        """A rejected append leaves the roster alone and exposes the reason."""
        ptr = boundary.name_index_ptr()

        assert boundary.append('{"invalid": "json"}') == MALFORMED

        assert boundary.count() == 2
        assert boundary.read(ptr, boundary.name_index_len()) == b"Archer\x00Bat\x00"
        reason = read_text(boundary, boundary.last_error_ptr(), boundary.last_error_len())
        assert "name" in reason

    def test_last_error_cleared_on_success(self, boundary):
        """A successful append clears the previous error."""
        boundary.append("{broken")
        assert boundary.last_error_len() > 0

        boundary.append(character_json("Cleric"))

        assert boundary.last_error_len() == 0
        assert boundary.last_error_ptr() == NULL_HANDLE

    def test_new_error_gets_new_buffer(self, boundary):
        """Each rejection publishes its own reason."""
        boundary.append("{broken")
        first = read_text(boundary, boundary.last_error_ptr(), boundary.last_error_len())
        boundary.append('{"name": ""}')
        second = read_text(boundary, boundary.last_error_ptr(), boundary.last_error_len())
        assert first != second

    def test_update_malformed_reports_reason(self, boundary):
        """A rejected update leaves the record alone and exposes the reason."""
        assert boundary.update(1, '{"name": "Bat", "health": -1}') == MALFORMED

        assert boundary.health(1) == 25
        assert boundary.last_error_len() > 0

        assert boundary.update(1, character_json("Bat", health=3)) == OK
        assert boundary.health(1) == 3
        assert boundary.last_error_ptr() == NULL_HANDLE

    def test_update_out_of_range(self, boundary):
        """Positions outside the roster raise rather than return a status."""
        with pytest.raises(IndexOutOfRangeError):
            boundary.update(2, character_json("Cleric"))

    def test_previous_error_buffer_released(self, boundary):
        """Only the latest rejection reason stays readable."""
        boundary.append("{broken")
        first = boundary.last_error_ptr()
        boundary.append('{"name": ""}')

        with pytest.raises(StaleBufferError):
            boundary.read(first, 0)
        assert boundary.last_error_ptr() != first
        assert first not in boundary._buffers

    def test_error_buffer_released_on_success(self, boundary):
        """A successful mutation drops the old reason buffer."""
        boundary.append("{broken")
        first = boundary.last_error_ptr()
        boundary.update(0, character_json("Archer"))

        with pytest.raises(StaleBufferError):
            boundary.read(first, 0)

    def test_pending_flag(self):
        """Append sets the flag, submit clears it."""
        boundary = RosterBoundary(RosterStore.from_json(roster_json("A")))
        assert boundary.has_pending_changes() == 0

        boundary.append(character_json("B"))
        assert boundary.has_pending_changes() == 1

        boundary.mark_submitted()
        assert boundary.has_pending_changes() == 0
