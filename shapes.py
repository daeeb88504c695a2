"""
Shape dispatch.

Every value resolves to exactly one Shape. Operations classify their operand
once and branch on the result through dispatch().
"""

import dataclasses
import logging
from collections.abc import Iterable, Iterator, Mapping, Sized
from types import SimpleNamespace
from typing import Any, Callable, Iterator as IteratorT

from pydantic import BaseModel

from models import Record, Shape
from utils import UnsupportedShape

logger = logging.getLogger(__name__)

_ATOMS = (str, bytes, bytearray, int, float, complex, bool)


def classify(x: Any) -> Shape:
    """Resolve the shape of x. Pure, total and idempotent."""
    if x is None or isinstance(x, _ATOMS):
        return Shape.SCALAR
    if isinstance(x, Mapping):
        return Shape.MAPPING
    if isinstance(x, (BaseModel, SimpleNamespace)):
        return Shape.RECORD
    if dataclasses.is_dataclass(x) and not isinstance(x, type):
        return Shape.RECORD
    if isinstance(x, Iterable):
        return Shape.SEQUENCE
    return Shape.SCALAR


def is_sequence(x: Any) -> bool:
    return classify(x) is Shape.SEQUENCE


def is_mapping(x: Any) -> bool:
    return classify(x) is Shape.MAPPING


def is_record(x: Any) -> bool:
    return classify(x) is Shape.RECORD


def is_scalar(x: Any) -> bool:
    return classify(x) is Shape.SCALAR


def is_lazy(x: Any) -> bool:
    """True for sequences that can only be measured by iterating them"""
    return classify(x) is Shape.SEQUENCE and not isinstance(x, Sized)


def is_one_shot(x: Any) -> bool:
    """True for producers that cannot be iterated twice (iterators, generators)"""
    return isinstance(x, Iterator)


def dispatch(x: Any, operation: str, **handlers: Callable[[Any], Any]) -> Any:
    """
    Classify x once and call the handler registered for its shape.

    Handlers are keyword arguments named after the lowercase shape value
    (sequence=, mapping=, record=, scalar=). A shape without a handler raises
    UnsupportedShape.
    """
    shape = classify(x)
    handler = handlers.get(shape.value)
    if handler is None:
        raise UnsupportedShape(operation, shape, x)
    return handler(x)


def record_items(x: Any) -> list:
    """(name, value) pairs of a record-shaped value in definition order"""
    if isinstance(x, Record):
        return x.field_items()
    if isinstance(x, BaseModel):
        return list(iter(x))
    if isinstance(x, SimpleNamespace):
        return list(vars(x).items())
    if hasattr(x, "__dict__"):
        return list(vars(x).items())
    return [(f.name, getattr(x, f.name)) for f in dataclasses.fields(x)]


def elements(x: Any) -> IteratorT:
    """
    Iterator over the elements the sequence combinators see: items for
    sequences, (key, value) entries for mappings and records.
    """
    return dispatch(
        x, "iterate",
        sequence=iter,
        mapping=lambda m: iter(list(m.items())),
        record=lambda r: iter(record_items(r)),
    )
