"""
Shared validators for input sanitization.
"""

import re

from catalog_shared.config.constants import Identifiers

_UNSAFE_EXTENSION_CHARS = re.compile(r"[^A-Za-z0-9]")


def is_valid_object_id(value: str | None) -> bool:
    """True when ``value`` is a 24 character hex identifier."""
    if not value:
        return False
    return bool(Identifiers.PATTERN.fullmatch(value))


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards. Escaping them makes the search
    text match literally.

    Args:
        value: The search string to escape

    Returns:
        The escaped string safe for use in LIKE patterns (escape char: backslash)
    """
    if not value:
        return value

    # Escape the escape character first, then the wildcards
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def file_extension(filename: str | None) -> str:
    """
    Extension of an uploaded file, taken after the last dot.

    A name without a dot yields the whole name, like ``"photo"`` -> ``"photo"``.
    Anything but ASCII letters and digits is stripped so the result can be
    used to build a filename inside the image directory.
    """
    if not filename:
        return ""
    return _UNSAFE_EXTENSION_CHARS.sub("", filename.rsplit(".", 1)[-1])


def is_plain_filename(name: str | None) -> bool:
    """True when ``name`` has no directory components."""
    if not name or name in (".", ".."):
        return False
    return "/" not in name and "\\" not in name
