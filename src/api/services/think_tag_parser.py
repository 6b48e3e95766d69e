"""Incremental splitter for streamed text containing <think> reasoning regions.

Model output arrives in chunks of arbitrary size, so a marker such as
``<think>`` may be cut anywhere (``"Before <th"`` + ``"ink>..."``). The parser
holds back a tail that may still grow into a marker between calls and classifies
everything else as either main or reasoning text. Nested open markers are
counted, and only the close that brings the depth back to zero leaves the
reasoning region.

Malformed markup is never an error: an unmatched close outside a region is
literal main text, and a misspelled close inside a region is reasoning text
(the region then stays open until a real close or ``reset()``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

DEFAULT_OPEN_MARKER = "<think>"
DEFAULT_CLOSE_MARKER = "</think>"


@dataclass(frozen=True)
class ParseResult:
    """Newly classified text produced by one call (not cumulative)."""

    main_content: str = ""
    reasoning_content: str = ""
    is_complete: bool = True


@dataclass(frozen=True)
class ParserDebugState:
    """Snapshot of parser internals for diagnostics."""

    buffer: str
    inside_reasoning: bool
    nesting_depth: int
    main_content_length: int
    reasoning_content_length: int


def _held_prefix_length(text: str, markers: Sequence[str]) -> int:
    """Length of the longest tail of ``text`` that is a strict prefix of a marker."""
    longest = max(len(marker) for marker in markers) - 1
    for size in range(min(longest, len(text)), 0, -1):
        tail = text[-size:]
        for marker in markers:
            if size < len(marker) and marker.startswith(tail):
                return size
    return 0


def markers_overlap(open_marker: str, close_marker: str) -> bool:
    """True when one marker occurs inside the other.

    Such a pair cannot be split reliably: a complete match of the shorter one
    may turn out to be the start of the longer one once more text arrives.
    """
    return open_marker in close_marker or close_marker in open_marker


class ThinkTagParser:
    """Streaming state machine separating main content from reasoning content."""

    def __init__(
        self,
        open_marker: str = DEFAULT_OPEN_MARKER,
        close_marker: str = DEFAULT_CLOSE_MARKER,
    ):
        if not open_marker or not close_marker:
            raise ValueError("Reasoning markers must be non-empty strings")
        if markers_overlap(open_marker, close_marker):
            raise ValueError("Open and close reasoning markers must not contain one another")

        self.open_marker = open_marker
        self.close_marker = close_marker
        self.reset()

    def reset(self) -> None:
        """Return to the initial state so the instance can serve a new turn."""
        self._buffer = ""
        self._inside_reasoning = False
        self._depth = 0
        self._main_content = ""
        self._reasoning_content = ""
        self._seen_marker = False

    def process_chunk(self, chunk: Optional[str]) -> ParseResult:
        """Classify one chunk and return only the text it newly settled."""
        remaining = self._buffer + (chunk or "")
        self._buffer = ""

        main_parts: list[str] = []
        reasoning_parts: list[str] = []

        while remaining:
            if not self._inside_reasoning:
                open_idx = remaining.find(self.open_marker)
                if open_idx < 0:
                    held = _held_prefix_length(remaining, (self.open_marker,))
                    main_parts.append(remaining[:len(remaining) - held])
                    self._buffer = remaining[len(remaining) - held:]
                    break

                main_parts.append(remaining[:open_idx])
                remaining = remaining[open_idx + len(self.open_marker):]
                self._inside_reasoning = True
                self._depth = 1
                self._seen_marker = True
                continue

            open_idx = remaining.find(self.open_marker)
            close_idx = remaining.find(self.close_marker)
            if open_idx < 0 and close_idx < 0:
                held = _held_prefix_length(
                    remaining, (self.open_marker, self.close_marker)
                )
                reasoning_parts.append(remaining[:len(remaining) - held])
                self._buffer = remaining[len(remaining) - held:]
                break

            if close_idx < 0 or 0 <= open_idx < close_idx:
                reasoning_parts.append(remaining[:open_idx])
                remaining = remaining[open_idx + len(self.open_marker):]
                self._depth += 1
                continue

            reasoning_parts.append(remaining[:close_idx])
            remaining = remaining[close_idx + len(self.close_marker):]
            self._depth -= 1
            if self._depth == 0:
                self._inside_reasoning = False

        return self._commit("".join(main_parts), "".join(reasoning_parts))

    def flush(self) -> ParseResult:
        """Settle a held partial marker at end of stream as text of the active region."""
        held = self._buffer
        self._buffer = ""
        if self._inside_reasoning:
            return self._commit("", held)
        return self._commit(held, "")

    def handle_malformed_tags(self, content: str) -> ParseResult:
        """Verbatim fallback: treat ``content`` as main text without parsing it."""
        content = content or ""
        self._main_content += content
        return ParseResult(main_content=content, reasoning_content="", is_complete=True)

    def _commit(self, main_delta: str, reasoning_delta: str) -> ParseResult:
        self._main_content += main_delta
        self._reasoning_content += reasoning_delta
        return ParseResult(
            main_content=main_delta,
            reasoning_content=reasoning_delta,
            is_complete=self.is_complete(),
        )

    def is_complete(self) -> bool:
        return not self._inside_reasoning and not self._buffer

    def is_plain_text(self, chunk: Optional[str]) -> bool:
        """Whether ``chunk`` can bypass the parser without changing any result."""
        if self._seen_marker or not self.is_complete():
            return False
        if not chunk:
            return True
        if self.contains_marker(chunk, self.open_marker, self.close_marker):
            return False
        return _held_prefix_length(chunk, (self.open_marker,)) == 0

    @property
    def nesting_depth(self) -> int:
        return self._depth

    def get_main_content(self) -> str:
        return self._main_content

    def get_reasoning_content(self) -> str:
        return self._reasoning_content

    def is_inside_reasoning(self) -> bool:
        return self._inside_reasoning

    def has_reasoning(self) -> bool:
        return bool(self._reasoning_content.strip())

    def has_ever_seen_marker(self) -> bool:
        return self._seen_marker

    def get_debug_state(self) -> ParserDebugState:
        return ParserDebugState(
            buffer=self._buffer,
            inside_reasoning=self._inside_reasoning,
            nesting_depth=self._depth,
            main_content_length=len(self._main_content),
            reasoning_content_length=len(self._reasoning_content),
        )

    @staticmethod
    def contains_marker(
        text: Optional[str],
        open_marker: str = DEFAULT_OPEN_MARKER,
        close_marker: str = DEFAULT_CLOSE_MARKER,
    ) -> bool:
        """Cheap pre-check: does ``text`` contain either marker literally."""
        if not text:
            return False
        return open_marker in text or close_marker in text
