"""
Struct tag parsing.

Follows the reflect.StructTag conventions: space-separated
``key:"value"`` pairs, values written as Go interpreted strings.
Scanning stops at the first malformed pair, like reflect does.
"""

import re
from typing import Dict, Iterable, Iterator, Tuple

from ...core.model import FieldMetadata, RECOGNIZED_TAG_KEYS

# key: any run of printable non-space characters except ':' and '"'
_TAG_PAIR = re.compile(r' *([^\x00-\x20:"\x7f]+):"((?:[^"\\]|\\.)*)"')

_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_ESCAPE_SEQUENCE = re.compile(r"\\(u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)")


def unquote_go_string(body: str) -> str:
    """Resolve backslash escapes in the body of a Go interpreted string."""

    def replace(match: "re.Match[str]") -> str:
        seq = match.group(1)
        if seq[0] in ("u", "x") and len(seq) > 1:
            return chr(int(seq[1:], 16))
        return _ESCAPES.get(seq, seq)

    return _ESCAPE_SEQUENCE.sub(replace, body)


def iter_tag_pairs(raw: str) -> Iterator[Tuple[str, str]]:
    """Yield (key, value) pairs in order until the tag stops being well formed."""
    pos = 0
    while pos < len(raw):
        if not raw[pos:].strip(" "):
            return
        match = _TAG_PAIR.match(raw, pos)
        if not match:
            return
        yield match.group(1), unquote_go_string(match.group(2))
        pos = match.end()


def parse_struct_tag(
    raw: str, keys: Iterable[str] = RECOGNIZED_TAG_KEYS
) -> FieldMetadata:
    """
    Parse a raw struct tag (without surrounding quotes) into metadata.

    Args:
        raw: Tag content, e.g. ``json:"id,omitempty" validate:"required"``
        keys: Tag keys to keep; all others are dropped

    Returns:
        FieldMetadata with the raw tag and the recognized values
    """
    wanted = set(keys)
    values: Dict[str, str] = {}
    for key, value in iter_tag_pairs(raw):
        # First occurrence wins, as with reflect.StructTag.Lookup
        if key in wanted and key not in values:
            values[key] = value
    return FieldMetadata(raw=raw, values=values)
