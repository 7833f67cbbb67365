"""Inline (wiki-style) renderer with word and character re-diffing.

The whole document is rendered as one stream: unchanged text passes
through, deleted and inserted spans are wrapped in configurable affixes
(``<del>``/``<ins>`` by default) and HTML-escaped.

A changed block is not shown as delete-then-add.  It is re-diffed one
level down, each level rendered by a fresh ``InlineFormat``:

``lines`` -> ``words`` -> ``characters`` (only with ``split_characters``)

Words keep the whitespace run that precedes them, so no separator is lost.
While re-diffing, newlines inside a block are replaced by
``NEWLINE_PLACEHOLDER`` so the tokenizer treats them as data; the
placeholder is turned back into a newline when the line level assembles
the result.
"""

from __future__ import annotations

import html
import re
import sys
from collections.abc import Sequence
from typing import Any

from text_diff.diff.engines import create_engine
from text_diff.errors import ConfigurationError
from text_diff.render.base import DiffFormat, Hunk, Renderer

NEWLINE_PLACEHOLDER = "\0"
SPLIT_LEVELS = ("lines", "words", "characters")
WHOLE_DOCUMENT = sys.maxsize

_WORD = re.compile(r"[ \t\n]*[^ \t\n]+|[ \t\n]+")


def split_words(text: str, newline_escape: str = "\n") -> list[str]:
    """Split *text* into words, each carrying its preceding whitespace run.

    A trailing whitespace run becomes a token of its own.  Existing
    placeholder characters are dropped first so they cannot be confused
    with escaped newlines.
    """
    text = text.replace(NEWLINE_PLACEHOLDER, "")
    return [
        token.replace("\n", newline_escape) for token in _WORD.findall(text)
    ]


def split_characters(text: str, newline_escape: str = "\n") -> list[str]:
    """Split *text* into single characters, escaping newlines."""
    return list(text.replace("\n", newline_escape))


class InlineFormat(DiffFormat):
    """Inline diff format.

    Args:
        ins_prefix: Text written before inserted text.
        ins_suffix: Text written after inserted text.
        del_prefix: Text written before deleted text.
        del_suffix: Text written after deleted text.
        block_header: Text written before each hunk.
        split_characters: Re-diff changed words down to characters.
        split_level: Granularity this instance renders at; callers leave
            the default ``"lines"``.
        escape: HTML-escape leaf text.
        engine: Engine used for the word and character re-diffs.
    """

    name = "inline"
    default_leading_context_lines = WHOLE_DOCUMENT
    default_trailing_context_lines = WHOLE_DOCUMENT

    def __init__(
        self,
        ins_prefix: str = "<ins>",
        ins_suffix: str = "</ins>",
        del_prefix: str = "<del>",
        del_suffix: str = "</del>",
        block_header: str = "",
        split_characters: bool = False,
        split_level: str = "lines",
        escape: bool = True,
        engine: str = "native",
    ) -> None:
        if split_level not in SPLIT_LEVELS:
            raise ConfigurationError(
                f"Unknown split level: '{split_level}'. Valid levels: {list(SPLIT_LEVELS)}"
            )
        self.ins_prefix = ins_prefix
        self.ins_suffix = ins_suffix
        self.del_prefix = del_prefix
        self.del_suffix = del_suffix
        self.block_header = block_header
        self.split_characters = split_characters
        self.split_level = split_level
        self.escape = escape
        self.engine = engine

    def get_params(self) -> dict[str, Any]:
        return {
            "ins_prefix": self.ins_prefix,
            "ins_suffix": self.ins_suffix,
            "del_prefix": self.del_prefix,
            "del_suffix": self.del_suffix,
            "block_header": self.block_header,
            "split_characters": self.split_characters,
            "split_level": self.split_level,
            "escape": self.escape,
            "engine": self.engine,
        }

    # -- hooks ---------------------------------------------------------

    def hunk_header(self, hunk: Hunk) -> str:
        return self.block_header

    def start_block(self, header: str) -> str:
        return header

    def context(self, lines: Sequence[str]) -> str:
        return self._join([self._encode(line) for line in lines])

    def added(self, lines: Sequence[str]) -> str:
        return self._wrap(lines, self.ins_prefix, self.ins_suffix)

    def deleted(self, lines: Sequence[str]) -> str:
        return self._wrap(lines, self.del_prefix, self.del_suffix)

    def changed(self, orig: Sequence[str], final: Sequence[str]) -> str:
        if self.split_level == "characters":
            return self.deleted(orig) + self.added(final)

        if self.split_level == "words":
            if self.split_characters:
                return self._rediff(
                    split_characters("".join(orig)),
                    split_characters("".join(final)),
                    "characters",
                )
            return self._shared_space_change(list(orig), list(final))

        words = self._rediff(
            split_words("\n".join(orig), NEWLINE_PLACEHOLDER),
            split_words("\n".join(final), NEWLINE_PLACEHOLDER),
            "words",
        )
        return words.replace(NEWLINE_PLACEHOLDER, "\n") + "\n"

    # -- helpers -------------------------------------------------------

    def _rediff(
        self, orig: list[str], final: list[str], level: str
    ) -> str:
        # The block header belongs to the outermost hunk only.
        child = InlineFormat(
            **{**self.get_params(), "split_level": level, "block_header": ""}
        )
        edits = create_engine(self.engine).diff(orig, final)
        return Renderer(child).render(edits)

    def _shared_space_change(self, orig: list[str], final: list[str]) -> str:
        # Leading spaces common to both words are written once, unmarked.
        prefix = ""
        while orig[0].startswith(" ") and final[0].startswith(" "):
            prefix += " "
            orig[0] = orig[0][1:]
            final[0] = final[0][1:]
        parts = [prefix]
        if any(orig):
            parts.append(self.deleted(orig))
        if any(final):
            parts.append(self.added(final))
        return "".join(parts)

    def _encode(self, text: str) -> str:
        return html.escape(text) if self.escape else text

    def _join(self, parts: Sequence[str]) -> str:
        if self.split_level == "lines":
            return "\n".join(parts) + "\n"
        return "".join(parts)

    def _wrap(self, lines: Sequence[str], prefix: str, suffix: str) -> str:
        encoded = [self._encode(line) for line in lines]
        encoded[0] = prefix + encoded[0]
        encoded[-1] = encoded[-1] + suffix
        return self._join(encoded)
