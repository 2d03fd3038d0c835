"""
Part-of-speech feature algebra.

Tags are written core["+"feature]*, e.g. "n+gen+p". A suffix rule
declares a delta such as "+p", "-f-n+m" or "v+inf": an optional new
core followed by feature additions (+) and removals (-). Merging a tag
with a delta yields the canonical form: the core followed by the sorted
feature set, so two merges that end in the same features compare equal
whatever order they were applied in.

Example:
    >>> merge_pos("aa", None, "-f-n+m")
    'aa+m'
    >>> merge_pos("aa", "aa+m", "+c")
    'aa+c+m'
"""

import re
from typing import List, Optional, Set, Tuple

_OP_SPLIT = re.compile(r'([+\-])')


def parse_delta(delta: Optional[str]) -> Tuple[str, List[Tuple[str, str]]]:
    """
    Split a tag or delta into its core and its feature operations.

    Args:
        delta: A string like "n+p-gen"; None and "" are empty deltas.

    Returns:
        (core, [(op, feature), ...]) where op is "+" or "-".
    """
    if not delta:
        return '', []

    parts = _OP_SPLIT.split(delta)
    core = parts[0]
    ops = []
    for i in range(1, len(parts) - 1, 2):
        feature = parts[i + 1]
        if feature:
            ops.append((parts[i], feature))
    return core, ops


def _apply(features: Set[str], ops: List[Tuple[str, str]]) -> None:
    for op, feature in ops:
        if op == '+':
            features.add(feature)
        else:
            features.discard(feature)


def merge_pos(base_tag: Optional[str], base_raw_tag: Optional[str], delta: Optional[str]) -> str:
    """
    Merge a resolved tag with a suffix-declared feature delta.

    Args:
        base_tag: The simplified tag of the stem ("n").
        base_raw_tag: The stem's composite tag if it has one ("n+p").
        delta: The suffix rule's delta.

    Returns:
        The merged composite tag, core first, features sorted.
    """
    core, base_ops = parse_delta(base_raw_tag or base_tag or '')
    features: Set[str] = set()
    _apply(features, base_ops)

    new_core, ops = parse_delta(delta)
    if new_core:
        core = new_core
    _apply(features, ops)

    return '+'.join([core] + sorted(features))


def split_pos(tag: str) -> Tuple[str, Optional[str]]:
    """
    Split a possibly composite tag for a Token.

    Returns:
        (core, raw) where raw is the full tag if it carried features, else None.
    """
    if '+' in tag:
        return tag.split('+', 1)[0], tag
    return tag, None
