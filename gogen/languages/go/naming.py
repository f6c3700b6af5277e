"""
Go-specific naming rules.

Handles Go visibility and the predeclared numeric type names.
"""

# Go builtin numeric types
GO_NUMERIC_TYPES = {
    "byte",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
}


def is_exported(name: str) -> bool:
    """Go exports an identifier when its first character is an uppercase letter."""
    return bool(name) and name[0].isupper()


def is_numeric_type(name: str) -> bool:
    """Check if a bare Go type name denotes a number."""
    return (
        name in GO_NUMERIC_TYPES
        or name.startswith("int")
        or name.startswith("uint")
        or name.startswith("float")
    )
