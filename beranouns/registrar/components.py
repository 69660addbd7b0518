"""
Label components — user-perceived characters of a label.

Prices are set per component, so the polar bear (bear + ZWJ + snowflake + VS16)
must count as one component, not four code points. This is a compact
subset of grapheme segmentation that covers what labels contain:
combining marks, variation selectors, skin-tone modifiers, keycaps,
tag sequences, ZWJ sequences and regional-indicator flags.
"""

from __future__ import annotations

import unicodedata

ZWJ = "\u200d"

_EXTENDING_CATEGORIES = {"Mn", "Me", "Mc"}


def _is_regional_indicator(ch: str) -> bool:
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


def _is_extender(ch: str) -> bool:
    cp = ord(ch)
    if 0x1F3FB <= cp <= 0x1F3FF:  # skin tones
        return True
    if 0xE0020 <= cp <= 0xE007F:  # tags
        return True
    if 0xFE00 <= cp <= 0xFE0F:
        return True
    return unicodedata.category(ch) in _EXTENDING_CATEGORIES


def split_components(label: str) -> tuple[str, ...]:
    """Split a label into components.

    Example:
        >>> split_components("🐻🇩🇪a")
        ('🐻', '🇩🇪', 'a')
    """
    clusters: list[str] = []
    join_next = False

    for ch in label:
        if not clusters:
            clusters.append(ch)
            join_next = ch == ZWJ
            continue

        previous = clusters[-1]
        if join_next or ch == ZWJ or _is_extender(ch):
            clusters[-1] = previous + ch
        elif (
            _is_regional_indicator(ch)
            and _is_regional_indicator(previous[-1])
            and sum(1 for c in previous if _is_regional_indicator(c)) % 2 == 1
        ):
            clusters[-1] = previous + ch
        else:
            clusters.append(ch)

        join_next = ch == ZWJ

    return tuple(clusters)


def is_single_component(value: str) -> bool:
    return isinstance(value, str) and len(split_components(value)) == 1


def normalize_label(label: str) -> str:
    """Canonical form used as the registry key (NFC)."""
    return unicodedata.normalize("NFC", label)


def label_problem(label: object) -> str | None:
    """Return why a label cannot be registered, or None if it can."""
    if not isinstance(label, str):
        return f"Label must be a string, got {type(label).__name__}"
    if not label:
        return "Label must not be empty"
    for ch in label:
        if ch.isspace():
            return f"Label must not contain whitespace ({ch!r})"
        category = unicodedata.category(ch)
        if category == "Cc" or (category == "Cf" and ch != ZWJ and not _is_extender(ch)):
            return f"Label contains control character U+{ord(ch):04X}"
    return None
