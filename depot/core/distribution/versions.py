"""Perl-style version comparison"""
import re
from typing import Tuple

_DOTTED = re.compile(r'^v?\d+(\.\d+){2,}$')
_VSTRING = re.compile(r'^v\d+(\.\d+)*$')
_DECIMAL = re.compile(r'^\d*(\.\d+)?$')


def version_key(version: str) -> Tuple[int, ...]:
    """
    Convert a version string into a comparable tuple
    
    Dotted versions (``v1.2.3``, ``1.2.3``) map to their components.
    Decimal versions (``1.002003``) are split into groups of three
    fractional digits, so ``1.002003`` and ``v1.2.3`` compare equal.
    Anything unparseable, including ``undef``, sorts lowest.
    """
    if version is None:
        return (0,)
    
    cleaned = str(version).strip().replace('_', '')
    
    if _DOTTED.match(cleaned) or _VSTRING.match(cleaned):
        parts = tuple(int(part) for part in cleaned.lstrip('v').split('.'))
    elif cleaned and _DECIMAL.match(cleaned):
        integer, _, fraction = cleaned.partition('.')
        fraction = fraction + '0' * (-len(fraction) % 3)
        groups = [int(fraction[i:i + 3]) for i in range(0, len(fraction), 3)]
        parts = (int(integer or 0), *groups)
    else:
        return (0,)
    
    # Trailing zero components do not change a version
    while len(parts) > 1 and parts[-1] == 0:
        parts = parts[:-1]
    return parts


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as left is older, equal or newer than right"""
    left_key, right_key = version_key(left), version_key(right)
    return (left_key > right_key) - (left_key < right_key)
