import time
import logging
from enum import Enum
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class TypingTrainerError(Exception):
    pass


class SessionFinalizedError(TypingTrainerError):
    pass


class Verdict(Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    PENDING = "pending"


class SessionState(Enum):
    ACTIVE = "active"
    FINALIZED = "finalized"


def count_words(text):
    return len(text.split())


def words_per_minute(words, elapsed):
    # None means "not available": no time has passed to normalize against
    if elapsed <= 0:
        return None
    return words * 60 / elapsed


@dataclass(frozen = True)
class SessionOutcome:
    chars_correct: int
    chars_total: int
    words_typed: int
    elapsed_seconds: float
    words_per_minute: float | None

    @property
    def accuracy(self):
        # an empty target is complete before the first keystroke
        if self.chars_total == 0:
            return 100.0
        return self.chars_correct / self.chars_total * 100


# session

class TypingSession:
    """One attempt at reproducing a fixed target text.

    Typed input never grows past the target, so every typed character
    lines up with the target character at the same index.
    """

    def __init__(self, target_text, clock = time.monotonic):
        self._target = "".join(target_text)
        self._typed = []
        self._clock = clock
        self._start = clock()
        self._state = SessionState.ACTIVE
        self._outcome = None
        logger.info("session started, %d target characters", len(self._target))

    @property
    def target(self):
        return self._target

    @property
    def typed(self):
        return "".join(self._typed)

    @property
    def position(self):
        return len(self._typed)

    @property
    def state(self):
        return self._state

    @property
    def is_complete(self):
        return len(self._typed) == len(self._target)

    def _ensure_active(self):
        if self._state is SessionState.FINALIZED:
            raise SessionFinalizedError("session has already been finalized")

    def apply_character(self, c):
        if not isinstance(c, str) or len(c) != 1:
            raise ValueError(f"expected a single character, got {c!r}")
        self._ensure_active()
        if len(self._typed) >= len(self._target):
            logger.debug("input capped at %d characters, dropped %r", len(self._target), c)
            return
        self._typed.append(c)

    def apply_backspace(self):
        self._ensure_active()
        if self._typed:
            self._typed.pop()

    def current_comparison(self):
        verdicts = []
        for i, expected in enumerate(self._target):
            if i >= len(self._typed):
                verdicts.append(Verdict.PENDING)
            elif self._typed[i] == expected:
                verdicts.append(Verdict.MATCH)
            else:
                verdicts.append(Verdict.MISMATCH)
        return verdicts

    def chars_correct(self):
        return sum(1 for a, b in zip(self._typed, self._target) if a == b)

    def elapsed(self):
        return self._clock() - self._start

    def live_metrics(self):
        """Running (wpm, accuracy) for the stats bar.

        Accuracy here is measured against what has been typed so far,
        not the whole target.
        """
        typed = self.typed
        wpm = words_per_minute(count_words(typed), self.elapsed())
        if not typed:
            return wpm, 100.0
        return wpm, self.chars_correct() / len(typed) * 100

    def finalize(self):
        if self._outcome is not None:
            return self._outcome

        typed = self.typed
        elapsed = self.elapsed()
        words = count_words(typed)
        self._outcome = SessionOutcome(
            chars_correct = self.chars_correct(),
            chars_total = len(self._target),
            words_typed = words,
            elapsed_seconds = elapsed,
            words_per_minute = words_per_minute(words, elapsed)
        )
        self._state = SessionState.FINALIZED
        logger.info("session finalized: %s", self._outcome)
        return self._outcome
