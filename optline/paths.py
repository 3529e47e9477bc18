"""
Path-addressed access to nested result trees.

A path is a dotted string where bracketed integers address sequence slots:
"server.port", "users[1].name", "matrix[0][2]". Segments made only of digits
index lists; every other segment is a mapping key.

assign() builds missing containers on demand: a list when the following
segment is numeric, a dict otherwise. Lists are padded with None when an index
lands past their end.
"""
import re
from collections.abc import MutableMapping, MutableSequence

_INDEX = re.compile(r"\[(\d+)\]")


def split(path, /):
    """
    Break a path into its segments.

    >>> split("users[1].name")
    ['users', '1', 'name']
    """
    if not isinstance(path, str):
        raise TypeError("split() argument must be a string")
    return _INDEX.sub(r".\1", path).split(".")


def _numeric(segment):
    return segment.isdecimal() and segment.isascii()


def _child(container, segment, default):
    if isinstance(container, MutableSequence):
        if not _numeric(segment):
            return default
        index = int(segment)
        return container[index] if index < len(container) else default
    if isinstance(container, MutableMapping):
        return container.get(segment, default)
    return default


def lookup(tree, path, /, default=None):
    """
    Read the value stored at `path`, or `default` when any segment is missing.
    """
    current = tree
    for segment in split(path):
        current = _child(current, segment, _MISSING)
        if current is _MISSING:
            return default
    return current


def _store(container, segment, value, path):
    if isinstance(container, MutableSequence):
        if not _numeric(segment):
            raise TypeError("cannot use key %r of path %r on a list" % (segment, path))
        index = int(segment)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    elif isinstance(container, MutableMapping):
        container[segment] = value
    else:
        raise TypeError("path %r crosses a %s value" % (path, type(container).__name__))


def assign(tree, path, value, /):
    """
    Write `value` at `path`, creating intermediate containers as needed.

    Returns the tree so calls can be chained.
    """
    segments = split(path)
    current = tree
    for segment, following in zip(segments, segments[1:]):
        child = _child(current, segment, None)
        if child is None:
            child = [] if _numeric(following) else {}
            _store(current, segment, child, path)
        current = child
    _store(current, segments[-1], value, path)
    return tree


_MISSING = object()


__all__ = (
    "split",
    "lookup",
    "assign",
)
