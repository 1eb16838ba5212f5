"""Randomised practice text: word streams, ICRT groups, segment token pools."""

import random
import re

from cw_trainer.constants import BOUNDARY
from cw_trainer.models import Segment

# One or more back-to-back boundaries: "<BT> <BT>" becomes "<BT>"
_DOUBLE_BOUNDARY_RE = re.compile(rf"{re.escape(BOUNDARY)}(?:\s{re.escape(BOUNDARY)})+")


def shuffle(items, rng: random.Random | None = None) -> list:
    """Return a uniformly shuffled copy of items. The input is left untouched."""
    result = list(items)
    (rng or random).shuffle(result)
    return result


def collapse_boundaries(text: str) -> str:
    """Merge adjacent boundary prosigns into one."""
    return _DOUBLE_BOUNDARY_RE.sub(BOUNDARY, text)


def random_words(
    pool: list[str],
    repetition: int,
    target_length: int,
    rng: random.Random | None = None,
) -> str:
    """Build a space-separated stream of at least target_length characters.

    The pool is replicated until its joined length covers the target, shuffled,
    and each token is then emitted `repetition` times in a row. Phrases wrapped
    in boundary prosigns would otherwise produce "<BT> <BT>" when repeated, so
    those runs are collapsed after every block. Collapsing shortens the stream,
    so a freshly shuffled copy of the pool is appended if the tokens run out.
    """
    if not pool:
        raise ValueError("Token pool must not be empty")
    if repetition < 1:
        raise ValueError(f"Repetition must be >= 1, got {repetition}")
    if target_length < 0:
        raise ValueError(f"Target length must be >= 0, got {target_length}")
    pool_length = sum(len(token) for token in pool)
    if pool_length == 0 and target_length > 0:
        raise ValueError("Token pool contains only empty tokens")

    tokens = []
    total = 0
    while total < target_length:
        tokens.extend(pool)
        total += pool_length
    tokens = shuffle(tokens, rng)

    content = ""
    index = 0
    while len(content) < target_length:
        if index == len(tokens):
            tokens.extend(shuffle(pool, rng))
        content = collapse_boundaries(content + f" {tokens[index]}" * repetition)
        index += 1
    return content


def icrt_groups(
    chars: list[str],
    group_size: int,
    target_length: int,
    rng: random.Random | None = None,
) -> str:
    """Build fixed-width character groups, each prefixed with a space.

    A trailing group shorter than group_size is dropped so every group sent
    has the same width.
    """
    if group_size < 1:
        raise ValueError(f"Group size must be >= 1, got {group_size}")
    if target_length < 0:
        raise ValueError(f"Target length must be >= 0, got {target_length}")
    if not chars and target_length > 0:
        raise ValueError("Character pool must not be empty")

    content = []
    while len(content) < target_length:
        content.extend(chars)
    content = shuffle(content, rng)

    out = ""
    for i in range(0, len(content), group_size):
        group = content[i:i + group_size]
        if len(group) == group_size:
            out += " " + "".join(group)
    return out


def build_segment_practice(segment: Segment) -> list[str]:
    """Token pool for a segment: words, then callsigns, then wrapped phrases."""
    tokens = list(segment.words) + list(segment.callsigns)
    tokens.extend(f"{BOUNDARY} {phrase} {BOUNDARY}" for phrase in segment.phrases)
    return tokens


def cumulative_characters(segments, index: int) -> list[str]:
    """Ordered union of the characters of segments[0..index]."""
    seen = set()
    chars = []
    for segment in segments[:index + 1]:
        for ch in segment.characters:
            if ch not in seen:
                seen.add(ch)
                chars.append(ch)
    return chars
