from state.history   import HistoryBuffers, create_history_buffers, push_with_limit
from state.smoothing import get_smoothed_age, get_smoothed_emotion, get_smoothed_gender, translate_emotion_name
from state.session   import DetectionSession

__all__ = [
    "HistoryBuffers",
    "create_history_buffers",
    "push_with_limit",
    "get_smoothed_emotion",
    "get_smoothed_gender",
    "get_smoothed_age",
    "translate_emotion_name",
    "DetectionSession",
]
