"""
Version Comparison

Dotted numeric version strings compared component by component.

Parsing rules:
- a leading "v" is ignored ("v18.18.0")
- missing trailing components count as zero ("1.81" == "1.81.0")
- a non-numeric suffix on a component is stripped and ends parsing
  ("1.82.0-nightly" -> 1.82.0, "3.12rc1.4" -> 3.12)
- a string without a leading number is rejected with ValueError
"""

import re
from enum import Enum
from typing import List, Optional

_LEADING_DIGITS = re.compile(r"\d+")
_DOTTED_NUMBER = re.compile(r"\d+(?:\.\d+)+")


class Comparison(int, Enum):
    """Result of comparing two versions."""
    LESS = -1
    EQUAL = 0
    GREATER = 1


def parse_version(version: str) -> List[int]:
    """
    Split a version string into integer components.

    Raises:
        ValueError: If the string has no leading numeric component
    """
    text = version.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]

    components: List[int] = []
    for part in text.split("."):
        match = _LEADING_DIGITS.match(part)
        if not match:
            break
        components.append(int(match.group()))
        if match.end() != len(part):
            # Suffix such as "-nightly" or "rc1": stop here
            break

    if not components:
        raise ValueError(f"Not a numeric version: {version!r}")
    return components


def compare(a: str, b: str) -> Comparison:
    """Compare two dotted versions numerically."""
    left = parse_version(a)
    right = parse_version(b)

    width = max(len(left), len(right))
    left += [0] * (width - len(left))
    right += [0] * (width - len(right))

    for x, y in zip(left, right):
        if x < y:
            return Comparison.LESS
        if x > y:
            return Comparison.GREATER
    return Comparison.EQUAL


def is_at_least(required: str, actual: str) -> bool:
    """True when actual is the same as or newer than required."""
    return compare(actual, required) != Comparison.LESS


def extract_version(text: str, pattern: Optional[str] = None) -> Optional[str]:
    """
    Pull a version out of a tool's output.

    Args:
        text: Output of the version query
        pattern: Optional regex; its first group (or whole match) is used

    Returns:
        The first dotted numeric substring, or None if there is none
    """
    if not text:
        return None

    if pattern:
        match = re.search(pattern, text)
        if not match:
            return None
        return match.group(1) if match.groups() else match.group(0)

    match = _DOTTED_NUMBER.search(text)
    return match.group(0) if match else None
