"""Tests for text_diff.diff.patch: parsing unified and context patches."""

import textwrap

import pytest

from text_diff.diff.ops import Add, Change, Copy, Delete
from text_diff.diff.patch import StringEngine, detect_format, split_patch_lines
from text_diff.errors import ConfigurationError, MalformedPatch

UNIFIED = textwrap.dedent("""\
    --- a/file.txt
    +++ b/file.txt
    @@ -1,3 +1,3 @@
     same
    -old
    +new
     same
    """)

CONTEXT = textwrap.dedent("""\
    *** a/file.txt
    --- b/file.txt
    ***************
    *** 1,3 ****
      same
    ! old
      same
    --- 1,3 ----
      same
    ! new
      same
    """)

EXPECTED = [
    Copy(lines=("same",)),
    Change(orig_lines=("old",), final_lines=("new",)),
    Copy(lines=("same",)),
]


class TestSplitAndDetect:
    """Line-break detection and format autodetection."""

    def test_split_crlf(self):
        assert split_patch_lines("a\r\nb\r\n") == ["a", "b"]

    def test_split_cr(self):
        assert split_patch_lines("a\rb") == ["a", "b"]

    def test_detect_unified(self):
        assert detect_format(["--- a", "+++ b"]) == "unified"

    def test_detect_context(self):
        assert detect_format(["*** a", "--- b"]) == "context"

    def test_detect_fails_without_headers(self):
        with pytest.raises(MalformedPatch, match="could not be detected"):
            detect_format(["@@ -1 +1 @@", "-a", "+b"])


class TestUnifiedPatch:
    """Unified patch parsing."""

    def test_autodetect(self):
        assert StringEngine().diff(UNIFIED) == EXPECTED

    def test_explicit_mode(self):
        assert StringEngine().diff(UNIFIED, mode="unified") == EXPECTED

    def test_crlf_patch(self):
        patch = UNIFIED.replace("\n", "\r\n")
        assert StringEngine().diff(patch) == EXPECTED

    def test_no_newline_marker_ignored(self):
        patch = textwrap.dedent("""\
            --- a
            +++ b
            @@ -1 +1 @@
            -old
            \\ No newline at end of file
            +new
            \\ No newline at end of file
            """)
        assert StringEngine().diff(patch) == [
            Change(orig_lines=("old",), final_lines=("new",))
        ]

    def test_pure_addition(self):
        patch = "--- a\n+++ b\n@@ -0,0 +1,2 @@\n+x\n+y\n"
        assert StringEngine().diff(patch) == [Add(lines=("x", "y"))]

    def test_pure_deletion(self):
        patch = "--- a\n+++ b\n@@ -1,2 +0,0 @@\n-x\n-y\n"
        assert StringEngine().diff(patch) == [Delete(lines=("x", "y"))]

    def test_multiple_hunks_join_context(self):
        patch = textwrap.dedent("""\
            --- a
            +++ b
            @@ -1,2 +1,2 @@
             a
            -b
            +B
            @@ -10,2 +10,2 @@
             j
            -k
            +K
            """)
        assert StringEngine().diff(patch) == [
            Copy(lines=("a",)),
            Change(orig_lines=("b",), final_lines=("B",)),
            Copy(lines=("j",)),
            Change(orig_lines=("k",), final_lines=("K",)),
        ]

    def test_bare_hunk_without_header(self):
        patch = " same\n-old\n+new\n"
        assert StringEngine().diff(patch, mode="unified") == [
            Copy(lines=("same",)),
            Change(orig_lines=("old",), final_lines=("new",)),
        ]

    def test_empty_context_line(self):
        patch = "--- a\n+++ b\n@@ -1,2 +1,2 @@\n\n-x\n+y\n"
        assert StringEngine().diff(patch) == [
            Copy(lines=("",)),
            Change(orig_lines=("x",), final_lines=("y",)),
        ]

    def test_preamble_lines_tolerated(self):
        patch = "diff --git a/f b/f\nindex 123..456 100644\n" + UNIFIED
        assert StringEngine().diff(patch) == EXPECTED

    def test_invalid_hunk_header(self):
        patch = "--- a\n+++ b\n@@ bogus @@\n"
        with pytest.raises(MalformedPatch) as exc_info:
            StringEngine().diff(patch)
        assert exc_info.value.line == "@@ bogus @@"
        assert exc_info.value.line_number == 3

    def test_unknown_marker(self):
        patch = "--- a\n+++ b\n@@ -1 +1 @@\n?what\n"
        with pytest.raises(MalformedPatch) as exc_info:
            StringEngine().diff(patch)
        assert exc_info.value.line == "?what"

    def test_truncated_hunk(self):
        patch = "--- a\n+++ b\n@@ -1,3 +1,3 @@\n same\n"
        with pytest.raises(MalformedPatch, match="before its declared length"):
            StringEngine().diff(patch)

    def test_garbage_outside_hunk(self):
        patch = "--- a\n+++ b\nhello\n@@ -1 +1 @@\n-a\n+b\n"
        with pytest.raises(MalformedPatch, match="outside of a unified hunk"):
            StringEngine().diff(patch)


class TestContextPatch:
    """Context patch parsing."""

    def test_autodetect(self):
        assert StringEngine().diff(CONTEXT) == EXPECTED

    def test_explicit_mode(self):
        assert StringEngine().diff(CONTEXT, mode="context") == EXPECTED

    def test_deletion_with_omitted_final_half(self):
        patch = textwrap.dedent("""\
            *** a
            --- b
            ***************
            *** 1,3 ****
              a
            - b
              c
            --- 1,2 ----
            """)
        assert StringEngine().diff(patch) == [
            Copy(lines=("a",)),
            Delete(lines=("b",)),
            Copy(lines=("c",)),
        ]

    def test_addition_with_omitted_original_half(self):
        patch = textwrap.dedent("""\
            *** a
            --- b
            ***************
            *** 1,2 ****
            --- 1,3 ----
              a
            + b
              c
            """)
        assert StringEngine().diff(patch) == [
            Copy(lines=("a",)),
            Add(lines=("b",)),
            Copy(lines=("c",)),
        ]

    def test_no_hunks(self):
        with pytest.raises(MalformedPatch, match="no hunks"):
            StringEngine().diff("*** a\n--- b\n")

    def test_disagreeing_context(self):
        patch = textwrap.dedent("""\
            *** a
            --- b
            ***************
            *** 1,2 ****
              a
            ! b
            --- 1,2 ----
              z
            ! B
            """)
        with pytest.raises(MalformedPatch, match="disagree"):
            StringEngine().diff(patch)

    def test_unknown_marker(self):
        patch = textwrap.dedent("""\
            *** a
            --- b
            ***************
            *** 1 ****
            ? a
            --- 1 ----
            """)
        with pytest.raises(MalformedPatch) as exc_info:
            StringEngine().diff(patch)
        assert exc_info.value.line_number == 5


class TestModes:
    """Mode validation."""

    def test_unknown_mode_raises(self):
        with pytest.raises(ConfigurationError, match="Unsupported patch mode"):
            StringEngine().diff(UNIFIED, mode="git")

    def test_empty_patch(self):
        assert StringEngine().diff("") == []
