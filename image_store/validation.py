"""File name and extension rules."""

from collections.abc import Container


def extract_extension(filename: str) -> str:
    """Return the part of ``filename`` after its last dot.

    A name without any dot is returned whole, so an upload named ``png``
    is treated as having the extension ``png``.
    """
    return filename.rsplit(".", 1)[-1]


def is_allowed_extension(extension: str, allowed: Container[str]) -> bool:
    """Exact, case-sensitive membership check against the allow-list."""
    return extension in allowed
