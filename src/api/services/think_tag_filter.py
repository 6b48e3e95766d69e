"""Utilities to hide <think>...</think> blocks from streamed text."""

from __future__ import annotations

from .think_tag_parser import DEFAULT_CLOSE_MARKER, DEFAULT_OPEN_MARKER, ThinkTagParser


def strip_think_blocks(
    text: str,
    open_marker: str = DEFAULT_OPEN_MARKER,
    close_marker: str = DEFAULT_CLOSE_MARKER,
) -> str:
    """Remove reasoning regions from a complete text.

    Nested regions go away as a whole and an unterminated region hides the
    rest of the text. A close marker with no open before it is kept.
    """
    if not text:
        return ""
    think_filter = ThinkTagStreamFilter(open_marker, close_marker)
    return think_filter.feed(text) + think_filter.flush()


class ThinkTagStreamFilter:
    """Incremental filter for streamed text containing <think> tags."""

    def __init__(
        self,
        open_marker: str = DEFAULT_OPEN_MARKER,
        close_marker: str = DEFAULT_CLOSE_MARKER,
    ):
        self._parser = ThinkTagParser(open_marker, close_marker)

    def feed(self, chunk: str) -> str:
        if not chunk:
            return ""
        return self._parser.process_chunk(chunk).main_content

    def flush(self) -> str:
        return self._parser.flush().main_content

    @property
    def hidden_reasoning(self) -> str:
        return self._parser.get_reasoning_content()
