"""
Adaptive difficulty controller.

Pure rules over a learner's recent attempts; never reads or writes session
storage. Rules are checked in order and the first match wins:

  1. confidence mode  -> maintain (ready to exit at >= 80% over last 20)
  2. correct run      -> advance +0.3 / +0.2 / +0.1 at 7 / 5 / 3
  3. incorrect run    -> lock at 4, reduce 0.2 / 0.1 at 3 / 2
  4. 10-attempt accuracy below 50% -> reduce 0.1, above 80% -> advance 0.1
  5. maintain
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from app.services.difficulty_levels import DifficultyLevel, shift_level

RECENT_WINDOW = 10
CONFIDENCE_WINDOW = 20
CONFIDENCE_EXIT_ACCURACY = 0.8
CONFIDENCE_MIN_ATTEMPTS = 10
NO_HISTORY_ACCURACY = 0.5

# (run length, level delta, reason), longest run first
CORRECT_RUN_RULES = [
    (7, 0.3, "Seven consecutive correct answers"),
    (5, 0.2, "Five consecutive correct answers"),
    (3, 0.1, "Three consecutive correct answers"),
]
LOCK_RUN = 4
INCORRECT_RUN_RULES = [
    (3, 0.2, "Three consecutive incorrect answers"),
    (2, 0.1, "Two consecutive incorrect answers"),
]

ADVANCE_CONFIDENCE = 0.85
REDUCE_CONFIDENCE = 0.4
LOCK_CONFIDENCE = 0.3


@dataclass
class DifficultyAdjustment:
    action: str                 # advance | maintain | reduce | lock
    from_level: DifficultyLevel
    to_level: DifficultyLevel
    reason: str
    confidence: float
    recommendation: str

    def to_dict(self):
        return {
            "action": self.action,
            "from_level": self.from_level.display_name,
            "to_level": self.to_level.display_name,
            "reason": self.reason,
            "confidence": self.confidence,
            "recommendation": self.recommendation,
        }


def consecutive(history: Sequence, correct: bool) -> int:
    """Length of the run of attempts with is_correct == correct at the tail."""
    n = 0
    for rec in reversed(history):
        if rec.is_correct != correct:
            break
        n += 1
    return n


def accuracy(history: Sequence) -> float:
    if not history:
        return NO_HISTORY_ACCURACY
    return sum(1 for r in history if r.is_correct) / len(history)


def _advance(level: DifficultyLevel, delta: float, reason: str) -> DifficultyAdjustment:
    target = shift_level(level, delta)
    return DifficultyAdjustment("advance", level, target, reason, ADVANCE_CONFIDENCE,
                                f"Advance from {level.display_name} to {target.display_name}")


def _reduce(level: DifficultyLevel, delta: float, reason: str) -> DifficultyAdjustment:
    target = shift_level(level, -delta)
    return DifficultyAdjustment("reduce", level, target, reason, REDUCE_CONFIDENCE,
                                f"Reduce difficulty from {level.display_name} to {target.display_name}")


def _confidence_mode(level: DifficultyLevel, history: Sequence) -> DifficultyAdjustment:
    recent = list(history)[-CONFIDENCE_WINDOW:]
    acc = accuracy(recent)
    if acc >= CONFIDENCE_EXIT_ACCURACY and len(recent) >= CONFIDENCE_MIN_ATTEMPTS:
        return DifficultyAdjustment("maintain", level, level, "Ready to exit confidence mode", acc,
                                    "Confidence restored - can resume adaptive progression")
    return DifficultyAdjustment("maintain", level, level, "Building confidence at current level", acc,
                                f"Continue practicing at {level.display_name} until 80% accuracy achieved")


def analyze_performance(current_level: DifficultyLevel, history: Sequence,
                        confidence_mode: bool = False) -> DifficultyAdjustment:
    """
    Recommend the next level from one model's attempt history (oldest first).

    Only the last 10 attempts count toward runs and accuracy; confidence mode
    looks at the last 20.
    """
    if confidence_mode:
        return _confidence_mode(current_level, history)

    recent = list(history)[-RECENT_WINDOW:]
    right = consecutive(recent, True)
    wrong = consecutive(recent, False)
    acc = accuracy(recent)

    for run, delta, reason in CORRECT_RUN_RULES:
        if right >= run:
            return _advance(current_level, delta, reason)

    if wrong >= LOCK_RUN:
        return DifficultyAdjustment("lock", current_level, current_level,
                                    "Four consecutive incorrect - entering confidence mode", LOCK_CONFIDENCE,
                                    "Enter confidence mode - stay at current level until performance improves")
    for run, delta, reason in INCORRECT_RUN_RULES:
        if wrong >= run:
            return _reduce(current_level, delta, reason)

    if acc < 0.5:
        return _reduce(current_level, 0.1, "Accuracy below 50% in recent questions")
    if acc > 0.8:
        return _advance(current_level, 0.1, "Accuracy above 80% in recent questions")

    return DifficultyAdjustment("maintain", current_level, current_level,
                                "Performance indicates appropriate difficulty level", acc,
                                "Continue at current level")
