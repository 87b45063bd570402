"""Stored-name policy for uploaded files."""

import re
import secrets
import time
from collections.abc import Callable

from unidecode import unidecode

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def generate_unique_id(clock: Callable[[], float] = time.time) -> str:
    """Time-ordered identifier: seconds and microseconds in hex plus random hex.

    Always lower-case ``[0-9a-f]``.
    """
    now = clock()
    seconds = int(now)
    micros = int((now - seconds) * 1_000_000)
    return f"{seconds:08x}{micros:05x}{secrets.token_hex(4)}"


def slugify(value: str) -> str:
    """Transliterate to ASCII and collapse everything else to single dashes."""
    value = unidecode(value or "").lower()
    value = _SLUG_RE.sub("-", value).strip("-")
    return value or "file"


class NamePolicy:
    """Maps an original upload name to the name it is stored under."""

    def __init__(
        self,
        *,
        unique: bool = True,
        translit: bool = False,
        clock: Callable[[], float] = time.time,
        id_generator: Callable[[], str] | None = None,
    ):
        self.unique = unique
        self.translit = translit
        self._clock = clock
        self._id_generator = id_generator or (lambda: generate_unique_id(clock))

    def compute_name(self, original: str, ext: str) -> str:
        # unique wins over translit; both need an extension to apply
        if self.unique and ext:
            return f"{self._id_generator()}.{ext}"
        if self.translit and ext:
            base = original[: -(len(ext) + 1)] if original.lower().endswith("." + ext.lower()) else original
            return f"{slugify(base)}.{ext}"
        return original

    def compute_sync_name(
        self,
        name: str,
        declared_size: int,
        max_allowed_size: int,
        extension: str = "png",
    ) -> str:
        """Name used on the remote host: ``<base><timestamp>.<size>x<max>.<extension>``.

        ``base`` is ``name`` up to its last dot, or empty when there is none.
        Consumers of the static host parse this format.
        """
        base = name.rpartition(".")[0]
        return f"{base}{int(self._clock())}.{declared_size}x{max_allowed_size}.{extension}"
