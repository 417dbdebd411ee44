"""Cache-busting placeholders.

A view embeds placeholders in its output; a caller that caches rendered
pages replaces them with fresh content afterwards. The signature is derived
from a salt so placeholders from an old salt are not mistaken for current
ones.
"""

from __future__ import annotations

import zlib
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

PLACEHOLDER_PREFIX: Final = "VIEW"


def placeholder_signature(salt: str) -> str:
    """Return the CRC32 of ``salt`` as 8 lowercase hex digits."""
    checksum = zlib.crc32(salt.encode("utf-8", "surrogatepass"))
    return f"{checksum:08x}"


def make_placeholder(name: str, signature: str) -> str:
    """Return the placeholder marker for ``name``."""
    return f"<![CDATA[{PLACEHOLDER_PREFIX}-{name.upper()}-{signature}]]>"


def replace_placeholders(
    output: str,
    replacements: Mapping[str, str],
    signature: str,
) -> str:
    """Substitute placeholders in rendered output.

    Placeholders carrying a different signature are left untouched.
    """
    for name, content in replacements.items():
        output = output.replace(make_placeholder(name, signature), content)
    return output
