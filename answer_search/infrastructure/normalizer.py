# answer_search/infrastructure/normalizer.py

from typing import List, Tuple


# ── Noise characters ─────────────────────────────────────────────────────────
# OCR output is full of punctuation that carries no meaning for matching.
# Every character in this set is deleted outright, never replaced by a space.
ASCII_NOISE = "()[]{}\"'`~!@#$%^&*+=|\\/?<>,.;:"
CJK_NOISE = "（）【】《》、，。；：！？…—－·"
FULLWIDTH_SPACE = "　"

NOISE_CHARS = frozenset(ASCII_NOISE + CJK_NOISE + FULLWIDTH_SPACE)


def is_noise_char(char: str) -> bool:
    return char in NOISE_CHARS


def normalize_with_offsets(text: str) -> Tuple[str, List[int]]:
    """
    Normalize text and remember where every surviving character came from.

    Steps, applied in a single pass over the decoded characters:
      1. drop noise characters
      2. collapse runs of ASCII spaces into one
      3. trim leading and trailing whitespace

    Returns (normalized, offsets) where offsets[i] is the index in `text`
    of normalized[i]. len(offsets) == len(normalized) always holds.
    """
    kept_chars: List[str] = []
    offsets: List[int] = []

    for index, char in enumerate(text):
        if is_noise_char(char):
            continue
        if not kept_chars and char.isspace():
            continue
        if char == " " and kept_chars[-1] == " ":
            continue
        kept_chars.append(char)
        offsets.append(index)

    while kept_chars and kept_chars[-1].isspace():
        kept_chars.pop()
        offsets.pop()

    return "".join(kept_chars), offsets


def normalize(text: str) -> str:
    """Strip noise characters and redundant whitespace. Case is preserved."""
    normalized, _ = normalize_with_offsets(text)
    return normalized


def fold_case(text: str) -> str:
    """
    Lower-case text one character at a time.

    Characters whose lower-case form is longer than one character (e.g. 'İ')
    are kept unchanged so the folded text keeps the same coordinates.
    """
    folded = []
    for char in text:
        lowered = char.lower()
        folded.append(lowered if len(lowered) == 1 else char)
    return "".join(folded)


def prepare(text: str) -> str:
    """Normalize then case-fold: the form both query and fields are scored in."""
    return fold_case(normalize(text))
