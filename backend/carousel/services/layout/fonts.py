"""Font descriptor cache shared by layout and rasterization."""

import re
import threading

DEFAULT_FAMILY = "Montserrat"

_DESCRIPTOR_RE = re.compile(r"^(?P<weight>\w+) (?P<size>\d+)px (?P<family>.+)$")


def build_descriptor(weight: str, size: int, family: str = DEFAULT_FAMILY) -> str:
    return f"{weight} {size}px {family}"


def parse_descriptor(descriptor: str) -> tuple[str, int, str]:
    """Split "bold 64px Montserrat" into (weight, size, family)."""
    match = _DESCRIPTOR_RE.match(descriptor)
    if not match:
        raise ValueError(f"Invalid font descriptor: {descriptor!r}")
    return match["weight"], int(match["size"]), match["family"]


class FontCache:
    """Append-only (weight, size) -> descriptor mapping.

    Reads need no lock; writes take one. Recomputing a key yields the same
    value, so a racing duplicate insert is harmless.
    """

    def __init__(self, family: str = DEFAULT_FAMILY):
        self.family = family
        self._entries: dict[tuple[str, int], str] = {}
        self._lock = threading.Lock()

    def descriptor(self, weight: str, size: int) -> str:
        key = (weight, size)
        cached = self._entries.get(key)
        if cached is not None:
            return cached
        value = build_descriptor(weight, size, self.family)
        with self._lock:
            return self._entries.setdefault(key, value)

    def __len__(self) -> int:
        return len(self._entries)
