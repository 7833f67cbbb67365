"""Patch-parsing engine.

``StringEngine`` turns an existing unified or context diff back into an
edit script instead of computing one.  The script only describes the lines
visible in the patch: context from separate hunks is joined into one
``Copy``, so the reconstructed sequences are the *visible* original and
final text, not the complete files.

Format detection (``mode="autodetect"``) looks at the first line starting
with ``***`` or ``---``; whichever comes first decides between context and
unified.  A bare hunk without either kind of header line cannot be
detected and needs an explicit ``mode``.

Recognised unified layout::

    --- a/file          (optional header)
    +++ b/file
    @@ -1,3 +1,3 @@     (optional when the patch is a single bare hunk)
     context
    -deleted
    +added
    \\ No newline at end of file

Recognised context layout::

    *** a/file          (optional header)
    --- b/file
    ***************
    *** 1,3 ****
      context
    ! changed
    - deleted
    --- 1,3 ----
      context
    ! changed
    + added
"""

from __future__ import annotations

import logging
import re

from text_diff.diff.ops import Operation, ScriptBuilder
from text_diff.errors import ConfigurationError, MalformedPatch

logger = logging.getLogger(__name__)

MODES = ("autodetect", "unified", "context")

_UNIFIED_HUNK = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_CONTEXT_ORIG_RANGE = re.compile(r"^\*\*\* (\d+)(?:,(\d+))? \*\*\*\*\s*$")
_CONTEXT_FINAL_RANGE = re.compile(r"^--- (\d+)(?:,(\d+))? ----\s*$")
_CONTEXT_SEPARATOR = "***************"

# Lines tolerated outside hunks (file headers and VCS preamble).
_PREAMBLE_PREFIXES = ("diff ", "index ", "Index: ", "====", "Only in ")


def split_patch_lines(patch: str) -> list[str]:
    """Split *patch* on its own line-break convention (``\\r\\n``, ``\\r`` or ``\\n``)."""
    if "\r\n" in patch:
        lnbr = "\r\n"
    elif "\r" in patch:
        lnbr = "\r"
    else:
        lnbr = "\n"
    lines = patch.split(lnbr)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def detect_format(lines: list[str]) -> str:
    """Return ``"unified"`` or ``"context"`` for the given patch lines.

    Raises:
        MalformedPatch: If neither header kind is present.
    """
    for line in lines:
        if line.startswith("***"):
            return "context"
        if line.startswith("---"):
            return "unified"
    raise MalformedPatch(
        "Type of diff could not be detected; pass mode='unified' or mode='context'",
        line=lines[0] if lines else None,
    )


class StringEngine:
    """Engine that parses unified or context patch text into an edit script."""

    name = "string"

    def diff(self, patch: str, mode: str = "autodetect") -> list[Operation]:
        """Parse *patch* into an edit script.

        Args:
            patch: Patch text in unified or context format.
            mode: ``"autodetect"``, ``"unified"`` or ``"context"``.

        Returns:
            Coalesced edit script of the lines visible in the patch.

        Raises:
            ConfigurationError: If *mode* is not recognised.
            MalformedPatch: If the patch cannot be interpreted.
        """
        if mode not in MODES:
            raise ConfigurationError(
                f"Unsupported patch mode: '{mode}'. Valid modes: {list(MODES)}"
            )

        lines = split_patch_lines(patch)
        if not lines:
            return []
        if mode == "autodetect":
            mode = detect_format(lines)
        logger.debug("Parsing %d patch lines as %s diff", len(lines), mode)

        if mode == "context":
            return _ContextParser(lines).parse()
        return _UnifiedParser(lines).parse()


# ---------------------------------------------------------------------------
# Unified
# ---------------------------------------------------------------------------


class _UnifiedParser:
    def __init__(self, lines: list[str]) -> None:
        self.lines = lines
        self.builder = ScriptBuilder()

    def parse(self) -> list[Operation]:
        if any(line.startswith("@@") for line in self.lines):
            self._parse_hunks()
        else:
            self._parse_bare()
        return self.builder.finish()

    def _parse_bare(self) -> None:
        """Single hunk without ``@@`` header; every line is a body line."""
        start = 0
        if (
            len(self.lines) >= 2
            and self.lines[0].startswith("--- ")
            and self.lines[1].startswith("+++ ")
        ):
            start = 2
        for index in range(start, len(self.lines)):
            self._body_line(index)

    def _parse_hunks(self) -> None:
        index = 0
        total = len(self.lines)
        while index < total:
            line = self.lines[index]
            if line.startswith("@@"):
                index = self._hunk(index)
            elif (
                line.startswith(("--- ", "+++ "))
                or line.startswith(_PREAMBLE_PREFIXES)
                or line == ""
            ):
                index += 1
            else:
                raise MalformedPatch(
                    "Unexpected line outside of a unified hunk",
                    line=line,
                    line_number=index + 1,
                )

    def _hunk(self, index: int) -> int:
        header = self.lines[index]
        match = _UNIFIED_HUNK.match(header)
        if match is None:
            raise MalformedPatch(
                "Invalid unified hunk header", line=header, line_number=index + 1
            )
        orig_left = 1 if match.group(2) is None else int(match.group(2))
        final_left = 1 if match.group(4) is None else int(match.group(4))
        index += 1

        while orig_left > 0 or final_left > 0:
            if index >= len(self.lines):
                raise MalformedPatch(
                    "Unified hunk ends before its declared length",
                    line=header,
                    line_number=index,
                )
            marker = self._body_line(index)
            if marker in (" ", ""):
                orig_left -= 1
                final_left -= 1
            elif marker == "-":
                orig_left -= 1
            elif marker == "+":
                final_left -= 1
            index += 1

        # Trailing "\ No newline at end of file" belongs to this hunk.
        while index < len(self.lines) and self.lines[index].startswith("\\"):
            index += 1
        return index

    def _body_line(self, index: int) -> str:
        line = self.lines[index]
        marker = line[:1]
        if marker == " ":
            self.builder.copy([line[1:]])
        elif marker == "":
            # Editors commonly strip the lone space of an empty context line.
            self.builder.copy([""])
        elif marker == "-":
            self.builder.delete([line[1:]])
        elif marker == "+":
            self.builder.add([line[1:]])
        elif marker != "\\":
            raise MalformedPatch(
                "Unknown unified diff line marker",
                line=line,
                line_number=index + 1,
            )
        return marker


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

_ORIG_MARKERS = {"  ": " ", "- ": "-", "! ": "!"}
_FINAL_MARKERS = {"  ": " ", "+ ": "+", "! ": "!"}


class _ContextParser:
    def __init__(self, lines: list[str]) -> None:
        self.lines = lines
        self.builder = ScriptBuilder()

    def parse(self) -> list[Operation]:
        index = 0
        total = len(self.lines)
        # File header / preamble up to the first hunk separator.
        while index < total and self.lines[index] != _CONTEXT_SEPARATOR:
            line = self.lines[index]
            if not (
                line.startswith(("*** ", "--- "))
                or line.startswith(_PREAMBLE_PREFIXES)
                or line == ""
            ):
                raise MalformedPatch(
                    "Unexpected line before the first context hunk",
                    line=line,
                    line_number=index + 1,
                )
            index += 1

        if index >= total:
            raise MalformedPatch(
                "Context diff contains no hunks",
                line=self.lines[0],
                line_number=1,
            )

        while index < total:
            index = self._hunk(index)
        return self.builder.finish()

    def _hunk(self, index: int) -> int:
        separator = self.lines[index]
        if separator != _CONTEXT_SEPARATOR:
            raise MalformedPatch(
                "Expected context hunk separator",
                line=separator,
                line_number=index + 1,
            )
        index += 1
        if index >= len(self.lines) or not _CONTEXT_ORIG_RANGE.match(
            self.lines[index]
        ):
            line = self.lines[index] if index < len(self.lines) else separator
            raise MalformedPatch(
                "Invalid context hunk original range",
                line=line,
                line_number=index + 1,
            )
        index += 1

        orig, index = self._side(index, _ORIG_MARKERS, _CONTEXT_FINAL_RANGE)
        if index >= len(self.lines):
            raise MalformedPatch(
                "Context hunk has no final range",
                line=separator,
                line_number=index,
            )
        index += 1
        final, index = self._side(index, _FINAL_MARKERS, None)

        self._pair(orig, final, index)
        return index

    def _side(
        self,
        index: int,
        markers: dict[str, str],
        terminator: re.Pattern[str] | None,
    ) -> tuple[list[tuple[str, str]], int]:
        entries: list[tuple[str, str]] = []
        while index < len(self.lines):
            line = self.lines[index]
            if line == _CONTEXT_SEPARATOR:
                break
            if terminator is not None and terminator.match(line):
                break
            if line.startswith("\\"):
                index += 1
                continue
            marker = markers.get(line[:2])
            if marker is None:
                if line in ("", " "):
                    marker, line = " ", "  "
                else:
                    raise MalformedPatch(
                        "Unknown context diff line marker",
                        line=line,
                        line_number=index + 1,
                    )
            entries.append((marker, line[2:]))
            index += 1
        return entries, index

    def _pair(
        self,
        orig: list[tuple[str, str]],
        final: list[tuple[str, str]],
        end_index: int,
    ) -> None:
        # A side without changes may be omitted; rebuild it from the
        # other side's context lines.
        if not orig:
            orig = [entry for entry in final if entry[0] == " "]
        if not final:
            final = [entry for entry in orig if entry[0] == " "]

        i = j = 0
        while i < len(orig) or j < len(final):
            if (
                i < len(orig)
                and j < len(final)
                and orig[i][0] == " "
                and final[j][0] == " "
            ):
                if orig[i][1] != final[j][1]:
                    raise MalformedPatch(
                        "Context lines of the two hunk halves disagree",
                        line=final[j][1],
                        line_number=end_index,
                    )
                self.builder.copy([orig[i][1]])
                i += 1
                j += 1
                continue

            deleted: list[str] = []
            added: list[str] = []
            while i < len(orig) and orig[i][0] != " ":
                deleted.append(orig[i][1])
                i += 1
            while j < len(final) and final[j][0] != " ":
                added.append(final[j][1])
                j += 1
            if not deleted and not added:
                raise MalformedPatch(
                    "Context lines of the two hunk halves do not line up",
                    line=(orig[i] if i < len(orig) else final[j])[1],
                    line_number=end_index,
                )
            self.builder.delete(deleted)
            self.builder.add(added)
