"""
Human readable size parsing ("400KB", "1g", "500mib")
"""

import re
from typing import Optional

from .exceptions import ConfigError

BYTE = 1
KILOBYTE = 1 << 10
MEGABYTE = 1 << 20
GIGABYTE = 1 << 30
TERABYTE = 1 << 40
PETABYTE = 1 << 50
EXABYTE = 1 << 60

_UNITS = {
    "B": BYTE,
    "K": KILOBYTE,
    "KB": KILOBYTE,
    "KIB": KILOBYTE,
    "M": MEGABYTE,
    "MB": MEGABYTE,
    "MIB": MEGABYTE,
    "G": GIGABYTE,
    "GB": GIGABYTE,
    "GIB": GIGABYTE,
    "T": TERABYTE,
    "TB": TERABYTE,
    "TIB": TERABYTE,
    "P": PETABYTE,
    "PB": PETABYTE,
    "PIB": PETABYTE,
    "E": EXABYTE,
    "EB": EXABYTE,
    "EIB": EXABYTE,
}

_FIRST_LETTER = re.compile(r"[^\W\d_]")


def parse_size(text: Optional[str]) -> int:
    """
    Convert a size string into a number of bytes

    Units are binary (K = 1024) and case-insensitive. An empty string,
    zero or a negative magnitude yields 0, which disables size based
    rotation. Unknown unit suffixes are ignored (multiplier 1).

    Raises:
        ConfigError: if the magnitude is not an integer
    """
    s = (text or "").strip().upper()
    if not s:
        return 0

    match = _FIRST_LETTER.search(s)
    if match is None:
        number, unit = s, ""
    else:
        number, unit = s[: match.start()], s[match.start():]

    try:
        magnitude = int(number.strip())
    except ValueError:
        raise ConfigError(f"invalid size {text!r}") from None

    if magnitude <= 0:
        return 0
    return magnitude * _UNITS.get(unit.strip(), BYTE)
