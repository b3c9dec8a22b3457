from collections import deque
from dataclasses import dataclass, field
from typing import Deque, MutableSequence, TypeVar

from state.schema import EmotionObservation, GenderObservation

T = TypeVar("T")


@dataclass
class HistoryBuffers:
    """Sliding-window history of accepted observations, one buffer per attribute."""
    emotion: Deque[EmotionObservation] = field(default_factory=deque)
    gender:  Deque[GenderObservation]  = field(default_factory=deque)
    age:     Deque[float]              = field(default_factory=deque)


def create_history_buffers() -> HistoryBuffers:
    return HistoryBuffers()


def push_with_limit(buffer: MutableSequence[T], item: T, limit: int) -> None:
    """
    Append `item` and drop the oldest entry if the buffer grew past `limit`.

    Works on any mutable sequence; the deques from create_history_buffers()
    evict in O(1), a plain list in O(n).
    A limit of 0 or less keeps the buffer permanently empty.
    """
    if limit <= 0:
        buffer.clear()
        return

    buffer.append(item)
    if len(buffer) > limit:
        del buffer[0]
