import random
import logging
from pathlib import Path

from wordfreq import top_n_list

from typing_session import TypingTrainerError

logger = logging.getLogger(__name__)

#config

WORD_COUNT = 15000
PASSAGE_LENGTH = 15
DEFAULT_TEXT_PATH = "typing.txt"


class TextLoadError(TypingTrainerError):
    pass


def load_target_text(path):
    path = Path(path)
    try:
        text = path.read_text(encoding = "utf-8")
    except FileNotFoundError as e:
        raise TextLoadError(f"target text not found: {path}") from e
    except UnicodeDecodeError as e:
        raise TextLoadError(f"target text is not valid UTF-8: {path}") from e
    except OSError as e:
        raise TextLoadError(f"cannot read target text {path}: {e.strerror or e}") from e

    # a trailing newline from the editor is not something to type
    text = text.rstrip("\r\n")
    logger.info("loaded %d characters from %s", len(text), path)
    return text


def load_words(word_count = WORD_COUNT):
    words = top_n_list("en", word_count)
    return [w for w in words if w.isalpha() and len(w) >= 3]


def generate_passage(length = PASSAGE_LENGTH, words = None, rng = None):
    if words is None:
        words = load_words()
    if not words:
        raise TextLoadError("no words available to build a passage")
    rng = rng or random.Random()

    picked = rng.sample(
        list(words),
        min(length, len(words))
    )

    logger.info("generated a %d-word passage", len(picked))
    return " ".join(picked)
