"""Character classes for password and string synthesis"""

from typing import Iterable

from mcp_random.engine.errors import EmptyAlphabetError, InvalidShapeError

# class name -> (full set, set without visually confusable glyphs)
CHARACTER_CLASSES = {
    "uppercase": ("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "ABCDEFGHJKLMNPQRSTUVWXYZ"),
    "lowercase": ("abcdefghijklmnopqrstuvwxyz", "abcdefghjkmnpqrstuvwxyz"),
    "numbers": ("0123456789", "23456789"),
    "symbols": ("!@#$%^&*()_+-=[]{}|;:,.<>?", "!@#$%^&*()_+-=[]{}|;:,.<>?"),
}

DEFAULT_CLASSES = frozenset(CHARACTER_CLASSES)


def build_charset(classes: Iterable[str], exclude_similar: bool = False) -> str:
    """Concatenate the selected character classes in canonical order

    Args:
        classes: Iterable of class names (uppercase, lowercase, numbers, symbols)
        exclude_similar: Use the reduced variant of each class

    Returns:
        The charset, each class appearing once

    Raises:
        InvalidShapeError: If a class name is unknown
        EmptyAlphabetError: If no class is selected
    """
    selected = set(classes)
    unknown = selected - set(CHARACTER_CLASSES)
    if unknown:
        raise InvalidShapeError(f"unknown character classes: {', '.join(sorted(unknown))}")

    charset = ""
    for name, (full, reduced) in CHARACTER_CLASSES.items():
        if name in selected:
            charset += reduced if exclude_similar else full

    if not charset:
        raise EmptyAlphabetError("At least one character type must be enabled")
    return charset
