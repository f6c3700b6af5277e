"""
Case conversion utilities for template output.

Splits identifiers into words and rejoins them in the case style
a target language expects.
"""

from typing import List
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    KEBAB_CASE = "kebab"  # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


WORD_SEPARATORS = frozenset("_- ")


def split_words(name: str) -> List[str]:
    """
    Split an identifier into words.

    Separators are underscore, hyphen and space. An uppercase letter
    starts a new word when it follows a lowercase letter or is itself
    followed by one, so "HTTPServer" splits into "HTTP" and "Server".
    """
    words: List[str] = []
    current: List[str] = []

    for i, char in enumerate(name):
        if char in WORD_SEPARATORS:
            if current:
                words.append("".join(current))
                current = []
            continue

        if char.isupper() and i > 0:
            prev_lower = name[i - 1].islower()
            next_lower = i + 1 < len(name) and name[i + 1].islower()
            if (prev_lower or next_lower) and current:
                words.append("".join(current))
                current = []

        current.append(char)

    if current:
        words.append("".join(current))

    return words


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    return "".join(word[0].upper() + word[1:].lower() for word in split_words(name))


def to_camel_case(name: str) -> str:
    """Convert to camelCase."""
    if not name:
        return name
    pascal = to_pascal_case(name)
    if not pascal:
        return pascal
    return pascal[0].lower() + pascal[1:]


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    return "_".join(word.lower() for word in split_words(name))


def to_kebab_case(name: str) -> str:
    """Convert to kebab-case."""
    return "-".join(word.lower() for word in split_words(name))


def convert_case(name: str, target_case: NamingCase) -> str:
    """Convert name to target case style."""
    if target_case == NamingCase.SNAKE_CASE:
        return to_snake_case(name)
    elif target_case == NamingCase.CAMEL_CASE:
        return to_camel_case(name)
    elif target_case == NamingCase.PASCAL_CASE:
        return to_pascal_case(name)
    elif target_case == NamingCase.KEBAB_CASE:
        return to_kebab_case(name)
    elif target_case == NamingCase.SCREAMING_SNAKE:
        return to_snake_case(name).upper()
    else:
        return name
