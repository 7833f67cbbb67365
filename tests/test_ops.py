"""Tests for text_diff.diff.ops: operation models, reverse and coalescing."""

import pytest
from pydantic import TypeAdapter, ValidationError

from text_diff.diff.ops import (
    Add,
    Change,
    Copy,
    Delete,
    Operation,
    ScriptBuilder,
    coalesce,
    reverse_script,
)


class TestOperationModels:
    """Side accessors and counts of each operation."""

    def test_copy_sides_equal(self):
        op = Copy(lines=("a", "b"))
        assert op.orig == ("a", "b")
        assert op.final == ("a", "b")
        assert op.orig_count() == op.final_count() == 2

    def test_add_has_no_original(self):
        op = Add(lines=("x",))
        assert op.orig == ()
        assert op.final == ("x",)
        assert op.orig_count() == 0

    def test_delete_has_no_final(self):
        op = Delete(lines=("x",))
        assert op.orig == ("x",)
        assert op.final == ()
        assert op.final_count() == 0

    def test_change_sides(self):
        op = Change(orig_lines=("old",), final_lines=("new", "newer"))
        assert op.orig_count() == 1
        assert op.final_count() == 2

    def test_empty_lines_rejected(self):
        with pytest.raises(ValidationError):
            Add(lines=())

    def test_change_requires_both_sides(self):
        with pytest.raises(ValidationError):
            Change(orig_lines=("a",), final_lines=())

    def test_frozen(self):
        op = Copy(lines=("a",))
        with pytest.raises(ValidationError):
            op.lines = ("b",)

    def test_discriminated_union_round_trip(self):
        """Operations dump with their kind tag and validate back."""
        adapter = TypeAdapter(list[Operation])
        edits = [
            Copy(lines=("a",)),
            Change(orig_lines=("b",), final_lines=("c",)),
            Add(lines=("d",)),
        ]
        dumped = adapter.dump_python(edits)
        assert [d["kind"] for d in dumped] == ["copy", "change", "add"]
        assert adapter.validate_python(dumped) == edits


class TestReverse:
    """Reversing swaps the roles of original and final."""

    def test_add_becomes_delete(self):
        assert Add(lines=("x",)).reverse() == Delete(lines=("x",))

    def test_delete_becomes_add(self):
        assert Delete(lines=("x",)).reverse() == Add(lines=("x",))

    def test_change_swaps_sides(self):
        op = Change(orig_lines=("a",), final_lines=("b",))
        assert op.reverse() == Change(orig_lines=("b",), final_lines=("a",))

    def test_plain_copy_is_unchanged(self):
        op = Copy(lines=("a",))
        assert op.reverse() is op

    def test_mapped_copy_swaps_content(self):
        op = Copy(lines=("Foo",), final_lines=("foo",))
        assert op.reverse() == Copy(lines=("foo",), final_lines=("Foo",))

    def test_reverse_script_is_involution(self):
        edits = [
            Copy(lines=("a",)),
            Delete(lines=("b",)),
            Change(orig_lines=("c",), final_lines=("d",)),
        ]
        assert reverse_script(reverse_script(edits)) == edits


class TestScriptBuilder:
    """ScriptBuilder folds raw runs into a coalesced script."""

    def test_delete_then_add_becomes_change(self):
        builder = ScriptBuilder()
        builder.copy(["a"])
        builder.delete(["b"])
        builder.add(["c"])
        builder.copy(["d"])
        assert builder.finish() == [
            Copy(lines=("a",)),
            Change(orig_lines=("b",), final_lines=("c",)),
            Copy(lines=("d",)),
        ]

    def test_interleaved_deletes_and_adds_fold(self):
        builder = ScriptBuilder()
        builder.delete(["a"])
        builder.add(["x"])
        builder.delete(["b"])
        builder.add(["y"])
        assert builder.finish() == [
            Change(orig_lines=("a", "b"), final_lines=("x", "y"))
        ]

    def test_consecutive_copies_merge(self):
        builder = ScriptBuilder()
        builder.copy(["a"])
        builder.copy(["b"])
        assert builder.finish() == [Copy(lines=("a", "b"))]

    def test_empty_runs_ignored(self):
        builder = ScriptBuilder()
        builder.copy([])
        builder.delete([])
        builder.add(["x"])
        assert builder.finish() == [Add(lines=("x",))]

    def test_mapped_copies_keep_final(self):
        builder = ScriptBuilder()
        builder.copy(["A"], ["a"])
        builder.copy(["b"])
        assert builder.finish() == [
            Copy(lines=("A", "b"), final_lines=("a", "b"))
        ]

    def test_finish_resets(self):
        builder = ScriptBuilder()
        builder.add(["x"])
        builder.finish()
        assert builder.finish() == []


class TestCoalesce:
    """coalesce() merges adjacent operations of the same kind."""

    def test_adjacent_copies(self):
        edits = [Copy(lines=("a",)), Copy(lines=("b",))]
        assert coalesce(edits) == [Copy(lines=("a", "b"))]

    def test_delete_and_add_fold_into_change(self):
        edits = [Delete(lines=("a",)), Add(lines=("b",))]
        assert coalesce(edits) == [
            Change(orig_lines=("a",), final_lines=("b",))
        ]

    def test_change_then_add_extends_change(self):
        edits = [
            Change(orig_lines=("a",), final_lines=("b",)),
            Add(lines=("c",)),
        ]
        assert coalesce(edits) == [
            Change(orig_lines=("a",), final_lines=("b", "c"))
        ]

    def test_no_adjacent_same_tag(self):
        edits = [
            Copy(lines=("a",)),
            Add(lines=("b",)),
            Copy(lines=("c",)),
            Copy(lines=("d",)),
            Delete(lines=("e",)),
        ]
        result = coalesce(edits)
        for left, right in zip(result, result[1:]):
            assert left.kind != right.kind
