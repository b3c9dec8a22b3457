"""
Aggregators that turn a window of per-frame readings into one display value.

Emotion:  most frequent label, ties broken by higher average confidence,
          then by first appearance in the window.
Gender:   most frequent label, ties broken by first appearance only.
Age:      arithmetic mean.

Confidences go in as 0–1 floats and come out as integer percentages.
"""

import math
from typing import Iterable, Optional

from state.schema import EmotionObservation, GenderObservation

# Localized labels for the side panel
_EMOTION_NAMES = {
    "neutral":  "平静",
    "happy":    "高兴",
    "sad":      "伤心",
    "angry":    "生气",
    "surprise": "惊讶",
    "fear":     "恐惧",
    "disgust":  "厌恶",
    "contempt": "轻蔑",
}

# OpenCV's Hershey fonts have no CJK glyphs, so the preview window uses these
_EMOTION_NAMES_EN = {
    "neutral":  "Neutral",
    "happy":    "Happy",
    "sad":      "Sad",
    "angry":    "Angry",
    "surprise": "Surprised",
    "fear":     "Fearful",
    "disgust":  "Disgusted",
    "contempt": "Contempt",
}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 upwards, the way the panel has always displayed numbers."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def to_percent(value: float) -> int:
    return int(round_half_up(value * 100))


def translate_emotion_name(name: str, language: str = "zh") -> str:
    table = _EMOTION_NAMES_EN if language == "en" else _EMOTION_NAMES
    return table.get(name, name)


def _tally(history: Iterable) -> dict[str, list[float]]:
    # label -> [count, total confidence], in order of first appearance
    counter: dict[str, list[float]] = {}
    for obs in history:
        stats = counter.setdefault(obs.label, [0, 0.0])
        stats[0] += 1
        stats[1] += obs.confidence
    return counter


def get_smoothed_emotion(history: Iterable[EmotionObservation]) -> Optional[EmotionObservation]:
    counter = _tally(history)
    if not counter:
        return None

    best_label = None
    best_count = -1
    best_avg   = -1.0
    for label, (count, total) in counter.items():
        avg = total / count
        if count > best_count or (count == best_count and avg > best_avg):
            best_label, best_count, best_avg = label, count, avg

    return EmotionObservation(best_label, to_percent(best_avg))


def get_smoothed_gender(history: Iterable[GenderObservation]) -> GenderObservation:
    counter = _tally(history)
    if not counter:
        return GenderObservation(None, None)

    best_label = None
    best_count = -1
    for label, (count, _) in counter.items():
        if count > best_count:
            best_label, best_count = label, count

    count, total = counter[best_label]
    return GenderObservation(best_label, to_percent(total / count))


def get_smoothed_age(history: Iterable[float]) -> Optional[float]:
    ages = list(history)
    if not ages:
        return None
    return round_half_up(sum(ages) / len(ages), 1)
