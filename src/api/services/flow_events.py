"""Flow events describing one streamed assistant turn.

Each event is a validated ``FlowEvent`` wrapped as ``{"flow_event": {...}}``,
the shape the rendering layer consumes.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class FlowEventStage(str, Enum):
    TRANSPORT = "transport"
    CONTENT = "content"
    META = "meta"


class FlowEventType(str, Enum):
    """Known event types and the stage each belongs to."""

    STREAM_STARTED = "stream_started"
    STREAM_ENDED = "stream_ended"
    STREAM_ERROR = "stream_error"
    TEXT_DELTA = "text_delta"
    REASONING_DELTA = "reasoning_delta"
    REASONING_SUMMARY = "reasoning_summary"

    @property
    def stage(self) -> FlowEventStage:
        if self in (FlowEventType.TEXT_DELTA, FlowEventType.REASONING_DELTA):
            return FlowEventStage.CONTENT
        if self is FlowEventType.REASONING_SUMMARY:
            return FlowEventStage.META
        return FlowEventStage.TRANSPORT


class FlowEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    event_id: str = Field(min_length=1)
    seq: int = Field(ge=1)
    ts: int = Field(ge=0)
    stream_id: str = Field(min_length=1)
    conversation_id: Optional[str] = None
    turn_id: Optional[str] = None
    event_type: FlowEventType
    stage: FlowEventStage
    payload: Dict[str, Any] = Field(default_factory=dict)


def now_ms() -> int:
    return int(time.time() * 1000)


def new_flow_event(
    *,
    seq: int,
    stream_id: str,
    event_type: FlowEventType,
    payload: Optional[Dict[str, Any]] = None,
    conversation_id: Optional[str] = None,
    turn_id: Optional[str] = None,
) -> FlowEvent:
    """Create one validated event; id, timestamp and stage are filled in."""
    return FlowEvent(
        event_id=str(uuid.uuid4()),
        seq=seq,
        ts=now_ms(),
        stream_id=stream_id,
        conversation_id=conversation_id,
        turn_id=turn_id,
        event_type=event_type,
        stage=event_type.stage,
        payload=payload or {},
    )


@dataclass
class FlowEventEmitter:
    """Build sequenced flow events for one stream.

    ``seq`` starts at 1 and increases by one per event unless a
    ``seq_provider`` is injected (shared counters across emitters).
    """

    stream_id: str
    conversation_id: Optional[str] = None
    turn_id: Optional[str] = None
    seq_provider: Optional[Callable[[], int]] = None
    _seq: int = 0

    def _next_seq(self) -> int:
        if self.seq_provider is not None:
            return int(self.seq_provider())
        self._seq += 1
        return self._seq

    def emit(self, event_type: FlowEventType, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        event = new_flow_event(
            seq=self._next_seq(),
            stream_id=self.stream_id,
            event_type=event_type,
            payload=payload,
            conversation_id=self.conversation_id,
            turn_id=self.turn_id,
        )
        return {"flow_event": event.model_dump(exclude_none=True)}

    def started(self, context_type: Optional[str] = None) -> Dict[str, Any]:
        return self.emit(
            FlowEventType.STREAM_STARTED,
            {"context_type": context_type} if context_type else None,
        )

    def ended(self) -> Dict[str, Any]:
        return self.emit(FlowEventType.STREAM_ENDED, {"done": True})

    def error(self, message: str) -> Dict[str, Any]:
        return self.emit(FlowEventType.STREAM_ERROR, {"error": str(message)})

    def text_delta(self, text: str) -> Dict[str, Any]:
        return self.emit(FlowEventType.TEXT_DELTA, {"text": text})

    def reasoning_delta(self, text: str) -> Dict[str, Any]:
        return self.emit(FlowEventType.REASONING_DELTA, {"reasoning": text})

    def reasoning_summary(self, *, has_reasoning: bool, reasoning_complete: bool) -> Dict[str, Any]:
        return self.emit(
            FlowEventType.REASONING_SUMMARY,
            {"has_reasoning": has_reasoning, "reasoning_complete": reasoning_complete},
        )
