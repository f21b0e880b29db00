"""
Key-set algebra over two parsed JSON objects.

Intersection and difference filter on value truthiness, not on bare key
presence: a key holding a falsy value (None, False, 0, "", [], {}) counts
as absent.
"""

from typing import Any, Dict, List


def is_truthy(value: Any) -> bool:
    """Truthiness of a decoded JSON value."""
    return bool(value)


def union_keys(a: Dict[str, Any], b: Dict[str, Any]) -> List[str]:
    """Keys of `a` in order, then keys of `b` not already seen."""
    return list(dict.fromkeys([*a, *b]))


def intersect_keys(a: Dict[str, Any], b: Dict[str, Any]) -> List[str]:
    """Keys of `a` whose value is truthy in both `a` and `b`."""
    return [
        key for key, value in a.items()
        if is_truthy(value) and is_truthy(b.get(key))
    ]


def difference_keys(a: Dict[str, Any], b: Dict[str, Any]) -> List[str]:
    """
    Keys of `a` not truthy in `b`, followed by keys of `b` not truthy in `a`.

    A key that is falsy on both sides appears once in each segment.
    """
    only_a = [key for key in a if not is_truthy(b.get(key))]
    only_b = [key for key in b if not is_truthy(a.get(key))]
    return only_a + only_b
