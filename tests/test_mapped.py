"""Tests for text_diff.diff.mapped: diffs over projected lines."""

import pytest

from text_diff.diff import MappedDiff
from text_diff.diff.mapped import remap_script
from text_diff.diff.ops import Add, Change, Copy
from text_diff.errors import InputMismatch
from text_diff.strings import CaseFoldCache


class TestComputeMapped:
    """Comparison on mapped sequences, output in real lines."""

    def test_emits_original_content(self):
        diff = MappedDiff.compute_mapped(
            ["Foo", "Bar"],
            ["foo", "baz"],
            ["foo", "bar"],
            ["foo", "baz"],
            engine="native",
        )
        assert diff.edits == (
            Copy(lines=("Foo",), final_lines=("foo",)),
            Change(orig_lines=("Bar",), final_lines=("baz",)),
        )
        assert diff.reconstruct_original() == ["Foo", "Bar"]
        assert diff.reconstruct_final() == ["foo", "baz"]

    def test_original_length_mismatch(self):
        with pytest.raises(InputMismatch) as exc_info:
            MappedDiff.compute_mapped(["a", "b"], ["a"], ["a"], ["a"])
        assert exc_info.value.side == "original"
        assert exc_info.value.content_len == 2
        assert exc_info.value.mapped_len == 1

    def test_final_length_mismatch(self):
        with pytest.raises(InputMismatch) as exc_info:
            MappedDiff.compute_mapped(["a"], ["a"], ["a"], [])
        assert exc_info.value.side == "final"

    def test_check_round_trip(self):
        original = ["Hello", "World", "again"]
        final = ["hello", "there", "WORLD"]
        diff = MappedDiff.ignore_case(original, final, engine="native")
        assert diff.check(original, final)


class TestConstructors:
    """ignore_case, ignore_whitespace and custom projections."""

    def test_ignore_case_identical(self):
        diff = MappedDiff.ignore_case(["ABC"], ["abc"], engine="native")
        assert diff.is_empty()
        assert diff.reconstruct_final() == ["abc"]

    def test_ignore_case_with_cache(self):
        cache = CaseFoldCache(max_size=8)
        MappedDiff.ignore_case(["A", "B"], ["a", "b"], cache=cache)
        MappedDiff.ignore_case(["A", "B"], ["a", "b"], cache=cache)
        assert cache.hits > 0

    def test_ignore_whitespace(self):
        diff = MappedDiff.ignore_whitespace(
            ["a  b", " c"], ["a b", "c\t"], engine="native"
        )
        assert diff.is_empty()

    def test_with_projection(self):
        diff = MappedDiff.with_projection(
            ["1: a", "2: b"],
            ["9: a", "9: c"],
            lambda line: line.split(": ", 1)[1],
            engine="native",
        )
        assert diff.count_added() == 1
        assert diff.count_deleted() == 1
        assert diff.edits[0] == Copy(lines=("1: a",), final_lines=("9: a",))

    def test_reverse_keeps_both_sides(self):
        diff = MappedDiff.ignore_case(["A"], ["a"], engine="native")
        assert diff.reverse().reconstruct_final() == ["A"]


class TestRemapScript:
    """Positional re-slicing."""

    def test_same_content_collapses_to_plain_copy(self):
        edits = [Copy(lines=("x",)), Add(lines=("y",))]
        assert remap_script(edits, ["a"], ["a", "b"]) == [
            Copy(lines=("a",)),
            Add(lines=("b",)),
        ]
