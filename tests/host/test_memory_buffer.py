"""Unit tests for the in-memory reference host.

Covers `MemoryBuffer`, `MemoryTransaction` and `Selection`: bounds checking,
read-only refusal, single open transaction, rollback, commit recording and
release semantics, and that other threads never read a half-applied
transaction.
"""

import threading

import pytest

from recase.core.CommandExecutor import edit_transaction
from recase.core.History import History
from recase.core.RegionResolver import Region
from recase.host.MemoryBuffer import MemoryBuffer, Selection


class TestSelection:
    def test_regions_are_coerced_and_ordered(self) -> None:
        selection = Selection([(4, 6), Region(0, 2)])
        assert selection.regions() == (Region(4, 6), Region(0, 2))
        assert len(selection) == 2

    def test_add_and_clear(self) -> None:
        selection = Selection()
        selection.add((1, 3))
        assert list(selection) == [Region(1, 3)]
        selection.clear()
        assert selection.regions() == ()

    def test_repr(self) -> None:
        assert repr(Selection([(0, 2)])) == "Selection([0, 2))"


class TestMemoryBuffer:
    def test_read_region(self) -> None:
        buffer = MemoryBuffer("千里之行")
        assert buffer.length() == 4
        assert buffer.read_region(1, 3) == "里之"

    @pytest.mark.parametrize("start, end", [(-1, 2), (3, 2), (0, 5)])
    def test_read_region_out_of_bounds(self, start: int, end: int) -> None:
        with pytest.raises(IndexError):
            MemoryBuffer("abcd").read_region(start, end)

    def test_read_only_refuses_edit(self) -> None:
        with pytest.raises(PermissionError):
            MemoryBuffer("abc", read_only=True).begin_edit()

    def test_single_open_transaction(self) -> None:
        buffer = MemoryBuffer("abc")
        transaction = buffer.begin_edit()
        with pytest.raises(PermissionError):
            buffer.begin_edit()
        transaction.rollback()
        buffer.begin_edit().commit()

    def test_shared_history(self) -> None:
        history = History(None)  # type: ignore[arg-type]
        buffer = MemoryBuffer("abc", history=history)
        assert buffer.history is history
        assert history.buffer is buffer


class TestMemoryTransaction:
    def test_replace_is_visible_immediately(self) -> None:
        buffer = MemoryBuffer("abc")
        transaction = buffer.begin_edit()
        transaction.replace_region(0, 1, "A")
        assert buffer.text == "Abc"
        transaction.commit()
        assert buffer.modified

    def test_rollback_restores_in_reverse(self) -> None:
        buffer = MemoryBuffer("abcdef")
        transaction = buffer.begin_edit()
        transaction.replace_region(0, 4, "ABCD")
        transaction.replace_region(2, 6, "xyzw")
        assert buffer.text == "ABxyzw"
        transaction.rollback()
        assert buffer.text == "abcdef"
        assert not buffer.modified
        assert not buffer.history.can_undo

    def test_length_mismatch_rejected(self) -> None:
        transaction = MemoryBuffer("straße").begin_edit()
        with pytest.raises(ValueError):
            transaction.replace_region(0, 6, "STRASSE")

    def test_out_of_bounds_rejected(self) -> None:
        transaction = MemoryBuffer("abc").begin_edit()
        with pytest.raises(IndexError):
            transaction.replace_region(2, 5, "xyz")

    def test_released_transaction_rejects_use(self) -> None:
        transaction = MemoryBuffer("abc").begin_edit()
        transaction.commit()
        assert transaction.released
        with pytest.raises(RuntimeError):
            transaction.replace_region(0, 1, "A")
        with pytest.raises(RuntimeError):
            transaction.commit()
        with pytest.raises(RuntimeError):
            transaction.rollback()

    def test_commit_without_changes_records_nothing(self) -> None:
        buffer = MemoryBuffer("abc")
        buffer.begin_edit().commit()
        assert not buffer.modified
        assert not buffer.history.can_undo

    def test_changes_are_recorded(self) -> None:
        transaction = MemoryBuffer("abc").begin_edit()
        transaction.replace_region(1, 2, "B")
        assert transaction.changes == [
            {"type": "replace", "start": 1, "original_text": "b", "new_text": "B"}
        ]


    def test_commit_records_one_compound_replace_action(self) -> None:
        buffer = MemoryBuffer("ab cd")
        transaction = buffer.begin_edit()
        transaction.replace_region(0, 2, "AB")
        transaction.replace_region(3, 5, "CD")
        transaction.commit()
        assert buffer.history._action_history == [
            {
                "type": "compound",
                "actions": [
                    {"type": "replace", "start": 0, "original_text": "ab", "new_text": "AB"},
                    {"type": "replace", "start": 3, "original_text": "cd", "new_text": "CD"},
                ],
            }
        ]


class TestConcurrentReaders:
    """Readers on other threads wait for the open transaction to be released."""

    @staticmethod
    def _start_reader(buffer: MemoryBuffer, seen: list) -> threading.Thread:
        reader = threading.Thread(target=lambda: seen.append(buffer.text), daemon=True)
        reader.start()
        return reader

    def test_reader_sees_original_text_after_rollback(self) -> None:
        buffer = MemoryBuffer("hello world")
        seen: list = []
        transaction = buffer.begin_edit()
        transaction.replace_region(0, 5, "HELLO")
        assert buffer.text == "HELLO world"

        reader = self._start_reader(buffer, seen)
        reader.join(timeout=0.2)
        assert reader.is_alive()
        assert seen == []

        transaction.rollback()
        reader.join(timeout=5)
        assert seen == ["hello world"]

    def test_reader_sees_all_replacements_after_commit(self) -> None:
        buffer = MemoryBuffer("hello world")
        seen: list = []
        with edit_transaction(buffer, "upper_case") as transaction:
            transaction.replace_region(0, 5, "HELLO")
            reader = self._start_reader(buffer, seen)
            reader.join(timeout=0.2)
            assert reader.is_alive()
            transaction.replace_region(6, 11, "WORLD")
        reader.join(timeout=5)
        assert seen == ["HELLO WORLD"]

    def test_read_region_waits_for_release(self) -> None:
        buffer = MemoryBuffer("abc")
        seen: list = []
        transaction = buffer.begin_edit()
        transaction.replace_region(0, 1, "A")
        reader = threading.Thread(
            target=lambda: seen.append(buffer.read_region(0, 3)), daemon=True
        )
        reader.start()
        reader.join(timeout=0.2)
        assert seen == []
        transaction.commit()
        reader.join(timeout=5)
        assert seen == ["Abc"]
