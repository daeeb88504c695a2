"""
Shape-polymorphic accessors: get/set, keys/values/entries, length and
emptiness, in-place slot updates and membership tests.

set(), change() and update() mutate the container they are given and
return that same object. Everything else leaves its input untouched.
"""

import itertools
import logging
from collections.abc import MutableMapping, MutableSequence, Sequence, Sized
from typing import Any, Callable, List, Tuple

from composition import is_
from lazy import LazySequence
from models import Record, Shape
from shapes import classify, record_items
from utils import KeyNotFound, UnsupportedShape, get_settings

logger = logging.getLogger(__name__)

_MISS = object()
_TEXT = (str, bytes, bytearray)


def _lookup(x: Any, shape: Shape, key: Any) -> Any:
    """One step of a get walk; returns _MISS when key is absent"""
    if shape is Shape.MAPPING:
        try:
            return x[key] if key in x else _MISS
        except TypeError:
            return _MISS
    if shape is Shape.RECORD:
        if isinstance(x, Record):
            return x.get_field(key) if x.has_field(key) else _MISS
        for name, value in record_items(x):
            if name == key:
                return value
        return _MISS
    if isinstance(key, bool) or not isinstance(key, int):
        return _MISS
    if isinstance(x, Sequence):
        try:
            return x[key]
        except IndexError:
            return _MISS
    if key < 0:
        return _MISS
    return next(itertools.islice(iter(x), key, None), _MISS)


def _walk(x: Any, keys: tuple, strict: bool) -> Any:
    for depth, key in enumerate(keys):
        shape = classify(x)
        if shape is Shape.SCALAR:
            if strict:
                raise KeyNotFound(key, keys[:depth])
            break
        x = _lookup(x, shape, key)
        if x is _MISS:
            if strict:
                raise KeyNotFound(key, keys[:depth])
            return None
    return x


def get(*keys) -> Callable[[Any], Any]:
    """
    Walk nested sequences, mappings and records by successive keys.

    Reaching a scalar before the keys run out stops the walk and returns that
    scalar. A missing key gives None unless Settings.strict_get is on, in
    which case this behaves like get_strict().
    """
    def _get(x):
        return _walk(x, keys, get_settings().strict_get)
    return _get


def get_strict(*keys) -> Callable[[Any], Any]:
    """Like get(), but raise KeyNotFound for a missing key or an early scalar"""
    def _get(x):
        return _walk(x, keys, True)
    return _get


def get_from(x: Any) -> Callable[[Any], Any]:
    def _get_from(key):
        return get(key)(x)
    return _get_from


def _assign(x: Any, shape: Shape, key: Any, value: Any, operation: str) -> None:
    if shape is Shape.SEQUENCE and isinstance(x, MutableSequence):
        if isinstance(key, bool) or not isinstance(key, int):
            raise TypeError(f"sequence positions must be integers, got {key!r}")
        if key >= len(x):
            x.extend([None] * (key - len(x)))
            x.append(value)
        else:
            x[key] = value
    elif shape is Shape.MAPPING and isinstance(x, MutableMapping):
        x[key] = value
    elif shape is Shape.RECORD:
        if isinstance(x, Record):
            x.set_field(key, value)
        else:
            setattr(x, str(key), value)
    else:
        raise UnsupportedShape(operation, shape, x)


def set(key: Any) -> Callable[[Any], Callable[[Any], Any]]:
    """set(key)(value)(container): bind key in place and return the container"""
    def _with_value(value):
        def _set(x):
            _assign(x, classify(x), key, value, "set")
            return x
        return _set
    return _with_value


def keys(x: Any) -> List[Any]:
    shape = classify(x)
    if shape is Shape.SEQUENCE:
        return list(range(length(x)))
    if shape is Shape.MAPPING:
        return list(x.keys())
    if shape is Shape.RECORD:
        return [name for name, _ in record_items(x)]
    return []


def values(x: Any) -> List[Any]:
    shape = classify(x)
    if shape is Shape.SEQUENCE:
        return list(x)
    if shape is Shape.MAPPING:
        return list(x.values())
    if shape is Shape.RECORD:
        return [value for _, value in record_items(x)]
    return []


def entries(x: Any) -> List[Tuple[Any, Any]]:
    """(key, value) pairs; sequence keys are positions"""
    shape = classify(x)
    if shape is Shape.SEQUENCE:
        return list(enumerate(x))
    if shape is Shape.MAPPING:
        return list(x.items())
    if shape is Shape.RECORD:
        return record_items(x)
    return []


def length(x: Any) -> int:
    """
    Number of elements. Lazy sequences are counted by iterating them, which
    never ends on an infinite producer; use is_empty() when that is all you
    need to know.
    """
    shape = classify(x)
    if shape is Shape.SEQUENCE:
        if isinstance(x, Sized):
            return len(x)
        logger.debug(f"Counting lazy sequence {x!r}")
        return sum(1 for _ in x)
    if shape in (Shape.MAPPING, Shape.RECORD):
        return len(entries(x))
    if isinstance(x, _TEXT):
        return len(x)
    raise UnsupportedShape("length", shape, x)


def is_empty(x: Any) -> bool:
    """
    True when x has no elements. Stops after the first element of a lazy
    sequence; on a one-shot iterator that element is consumed.
    """
    shape = classify(x)
    if shape is Shape.SEQUENCE:
        if isinstance(x, Sized):
            return len(x) == 0
        if isinstance(x, LazySequence):
            return x.is_empty()
        for _ in x:
            return False
        return True
    return length(x) == 0


def non_empty(x: Any) -> bool:
    return not is_empty(x)


def change(fn: Callable[[Any], Any], *names) -> Callable[[Any], Any]:
    """Replace the named slots (all slots when none named) with fn(old), in place"""
    def _change(x):
        shape = classify(x)
        targets = names or keys(x)
        for key in targets:
            _assign(x, shape, key, fn(_lookup(x, shape, key)), "change")
        return x
    return _change


def update(source: Any, *names) -> Callable[[Any], Any]:
    """Copy the named slots (all of source's when none named) from source into the target, in place"""
    def _update(target):
        shape = classify(target)
        targets = names or keys(source)
        for key in targets:
            _assign(target, shape, key, get(key)(source), "update")
        return target
    return _update


def inside(container: Any) -> Callable[[Any], bool]:
    """
    Membership in container: by strict value (see composition.is_) for
    sequences and mapping values, as a substring for strings, by field name
    for records.
    """
    def _inside(x):
        same = is_(x)
        shape = classify(container)
        if shape is Shape.SEQUENCE:
            return any(same(item) for item in container)
        if shape is Shape.MAPPING:
            return any(same(item) for item in container.values())
        if shape is Shape.RECORD:
            return x in keys(container)
        if isinstance(container, str):
            return isinstance(x, str) and x in container
        if isinstance(container, (bytes, bytearray)):
            return isinstance(x, (bytes, bytearray)) and x in container
        raise UnsupportedShape("inside", shape, container)
    return _inside


def outside(container: Any) -> Callable[[Any], bool]:
    def _outside(x):
        return not inside(container)(x)
    return _outside


def has(x: Any) -> Callable[[Any], bool]:
    def _has(container):
        return inside(container)(x)
    return _has


def hasnt(x: Any) -> Callable[[Any], bool]:
    def _hasnt(container):
        return not inside(container)(x)
    return _hasnt
