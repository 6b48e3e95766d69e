"""Route one streamed assistant turn through a think-tag parser.

The service owns one ``ThinkTagParser`` and reuses it across turns via
``start_turn()``. Chunks that provably contain no marker skip the parser
while it has never seen one; everything else is classified by the parser and
accumulated on an ``AssistantMessage``. Fast-path chunks are still recorded
as main text on the parser, so its accumulators and the message agree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Dict, Optional

from .flow_events import FlowEventEmitter
from .reasoning_config_service import ReasoningConfig
from .think_tag_parser import ParseResult, ThinkTagParser

logger = logging.getLogger(__name__)


@dataclass
class AssistantMessage:
    """Accumulated state of the assistant reply being streamed."""

    text: str = ""
    reasoning: str = ""
    typing: bool = True

    @property
    def has_reasoning(self) -> bool:
        return bool(self.reasoning.strip())


class ReasoningStreamService:
    """Split a streamed reply into visible text and reasoning, turn by turn."""

    def __init__(
        self,
        config: Optional[ReasoningConfig] = None,
        emitter: Optional[FlowEventEmitter] = None,
        parser: Optional[ThinkTagParser] = None,
    ):
        self.config = config or ReasoningConfig()
        self.emitter = emitter
        self.parser = parser or ThinkTagParser(
            self.config.open_marker,
            self.config.close_marker,
        )
        self.message = AssistantMessage()

    def start_turn(self) -> None:
        self.parser.reset()
        self.message = AssistantMessage()

    def process(self, chunk: Optional[str]) -> ParseResult:
        chunk = chunk or ""
        if self.config.fast_path_enabled and self.parser.is_plain_text(chunk):
            # verbatim, but still recorded so parser accumulators match the message
            result = self.parser.handle_malformed_tags(chunk)
        else:
            try:
                result = self.parser.process_chunk(chunk)
            except Exception as e:
                if not self.config.fallback_on_error:
                    raise
                logger.warning(f"Error parsing think tags, falling back to plain text: {e}")
                result = self.parser.handle_malformed_tags(chunk)

        self._apply(result)
        return result

    def finish(self) -> ParseResult:
        result = self.parser.flush()
        self._apply(result)
        self.message.typing = False

        if self.parser.is_inside_reasoning():
            logger.warning(
                f"Stream ended inside an unterminated reasoning region "
                f"(depth={self.parser.nesting_depth}, reasoning={len(self.message.reasoning)} chars)"
            )
        else:
            logger.debug(
                f"Turn complete: text={len(self.message.text)} chars, "
                f"reasoning={len(self.message.reasoning)} chars"
            )
        return result

    def _apply(self, result: ParseResult) -> None:
        self.message.text += result.main_content
        self.message.reasoning += result.reasoning_content

    @staticmethod
    def _delta_events(emitter: FlowEventEmitter, result: ParseResult) -> list[Dict[str, Any]]:
        events = []
        if result.reasoning_content:
            events.append(emitter.reasoning_delta(result.reasoning_content))
        if result.main_content:
            events.append(emitter.text_delta(result.main_content))
        return events

    async def stream(
        self,
        chunks: AsyncIterable[str],
        *,
        context_type: Optional[str] = None,
        emitter: Optional[FlowEventEmitter] = None,
    ) -> AsyncIterator[Dict[str, Any]]:
        """Consume a chunk source and yield flow events for the whole turn.

        Pass a fresh ``emitter`` per turn when the service is reused; the
        constructor emitter keeps counting ``seq`` across turns.
        """
        emitter = emitter or self.emitter
        if emitter is None:
            raise RuntimeError("ReasoningStreamService.stream requires a FlowEventEmitter")

        self.start_turn()
        yield emitter.started(context_type=context_type)

        try:
            async for chunk in chunks:
                for event in self._delta_events(emitter, self.process(chunk)):
                    yield event
        except Exception as e:
            logger.error(f"Chunk source failed: {e}", exc_info=True)
            self.message.typing = False
            yield emitter.error(str(e))
            return

        for event in self._delta_events(emitter, self.finish()):
            yield event
        yield emitter.reasoning_summary(
            has_reasoning=self.message.has_reasoning,
            reasoning_complete=not self.parser.is_inside_reasoning(),
        )
        yield emitter.ended()
