import re
from pathlib import Path
from typing import Union


def tidy_key(name: Union[str, Path]) -> str:
    """
    Cleans up a file name or label so it can be used as a cache key by:
    - Dropping any directory and file suffix from paths.
    - Replacing spaces, dashes and other separators with underscores.
    - Converting to lowercase.
    - Collapsing repeated underscores and stripping them from the ends.

    Args:
        name: The input file path or label.

    Returns:
        str: The cleaned up key.

    Raises:
        ValueError: Nothing usable is left after cleaning.
    """
    if isinstance(name, Path):
        name = name.stem
    name = str(name)

    name = re.sub(r'[\s\-/\\.:;,()\[\]{}]', '_', name)
    name = name.lower()
    name = re.sub(r'[^a-z0-9_]', '', name)
    name = re.sub(r'_+', '_', name)
    name = name.strip('_')

    if not name:
        raise ValueError("Cannot build a key from an empty name")
    return name


def source_cache_key(prefix: str, name: Union[str, Path]) -> str:
    return f"{prefix}-{tidy_key(name)}"
