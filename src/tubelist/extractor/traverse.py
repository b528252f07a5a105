"""Fallible traversal of parsed JSON trees.

YouTube responses are deeply nested and change shape without notice, so every
lookup goes through :func:`traverse`, which never raises on a missing or
mistyped node. Callers decide what absence means:

* :func:`require` turns absence into a :class:`FieldExtractionError` naming
  the field and the step at which the path broke off.
* :func:`optional` turns absence into a default value.

Path elements are ``str`` keys for objects and ``int`` indices for arrays.
"""

from typing import Any, Union

from .errors import FieldExtractionError

PathKey = Union[str, int]


class _Missing:
    """Marker for a value that is not present in the tree."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class PathNotFound(LookupError):
    """Describes where a path lookup stopped."""

    def __init__(self, path: tuple, depth: int, reason: str) -> None:
        self.path = path
        self.depth = depth
        self.reason = reason
        super().__init__(f"{format_path(path)}: {reason} at {format_path(path[: depth + 1])}")


def format_path(path: tuple) -> str:
    """Render a path as ``a.b[0].c``."""
    out = ""
    for key in path:
        if isinstance(key, int):
            out += f"[{key}]"
        else:
            out += f".{key}" if out else str(key)
    return out or "<root>"


def _step(node: Any, key: PathKey) -> tuple[Any, str | None]:
    """Descend one level, returning (value, None) or (MISSING, reason)."""
    if isinstance(key, int) and not isinstance(key, bool):
        if not isinstance(node, list):
            return MISSING, f"expected array, got {type(node).__name__}"
        try:
            return node[key], None
        except IndexError:
            return MISSING, f"index {key} out of range (length {len(node)})"
    if not isinstance(node, dict):
        return MISSING, f"expected object, got {type(node).__name__}"
    if key not in node:
        return MISSING, f"key {key!r} not found"
    return node[key], None


def _walk(obj: Any, path: tuple) -> tuple[Any, PathNotFound | None]:
    node = obj
    for depth, key in enumerate(path):
        node, reason = _step(node, key)
        if reason is not None:
            return MISSING, PathNotFound(path, depth, reason)
        if node is None:
            # JSON null is treated the same as an absent key
            return MISSING, PathNotFound(path, depth, "value is null")
    return node, None


def traverse(obj: Any, *path: PathKey, expected_type: type | tuple | None = None) -> Any:
    """Return the value at ``path`` inside ``obj`` or :data:`MISSING`."""
    value, _ = _walk(obj, path)
    if value is MISSING:
        return MISSING
    if expected_type is not None and not isinstance(value, expected_type):
        return MISSING
    return value


def optional(
    obj: Any,
    *path: PathKey,
    expected_type: type | tuple | None = None,
    default: Any = None,
) -> Any:
    """Return the value at ``path`` or ``default`` when it is absent."""
    value = traverse(obj, *path, expected_type=expected_type)
    return default if value is MISSING else value


def require(
    obj: Any,
    *path: PathKey,
    what: str,
    expected_type: type | tuple | None = None,
) -> Any:
    """Return the value at ``path`` or raise :class:`FieldExtractionError`.

    Args:
        obj: Parsed JSON tree.
        *path: Keys and indices to follow.
        what: Name of the field being looked up, used in the error message.
        expected_type: Type (or tuple of types) the value must have.
    """
    value, not_found = _walk(obj, path)
    if not_found is not None:
        raise FieldExtractionError(what, not_found)
    if expected_type is not None and not isinstance(value, expected_type):
        message = (
            f"{format_path(path)}: expected {_type_name(expected_type)}, "
            f"got {type(value).__name__}"
        )
        raise FieldExtractionError(what, TypeError(message))
    return value


def _type_name(expected_type: type | tuple) -> str:
    if isinstance(expected_type, tuple):
        return " or ".join(t.__name__ for t in expected_type)
    return expected_type.__name__
