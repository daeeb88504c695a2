"""
Curried combinators: combinator(config...)(subject).

The lazy ones (map, filter, flatten, flatten_until, scan_left, scan_right,
limit, skip, batch, enumerate) return a LazySequence and do no work until
it is iterated. Mappings and records are seen as their (key, value) entries.

scan_right, fold_right, sort, distinct, reverse and array read their whole
input and never return on an infinite producer.
"""

import builtins
import functools
import itertools
import logging
import statistics
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from accessors import entries
from lazy import LazySequence, Restartable, check_count, lazy
from models import Record, Shape
from shapes import classify, dispatch, is_lazy
from utils import UnsupportedShape, config_error, fit_arity, get_settings

logger = logging.getLogger(__name__)


def _identity(x):
    return x


# --------- lazy sequence combinators ----------

def map(fn: Callable) -> Callable[[Any], LazySequence]:
    """Lazily apply fn(element, index, source) to every element"""
    def _map(xs):
        return lazy(xs).map(fn)
    return _map


def filter(pred: Callable) -> Callable[[Any], LazySequence]:
    """Lazily keep elements where pred(element, index, source) holds; index is the source position"""
    def _filter(xs):
        return lazy(xs).filter(pred)
    return _filter


def flatten(depth: int = 1) -> Callable[[Any], LazySequence]:
    check_count("flatten depth", depth, 0)

    def _flatten(xs):
        return lazy(xs).flatten(depth)
    return _flatten


def flatten_until(pred: Callable[[Any], bool]) -> Callable[[Any], LazySequence]:
    def _flatten_until(xs):
        return lazy(xs).flatten_until(pred)
    return _flatten_until


def scan_left(fn: Callable[[Any, Any], Any], seed: Any) -> Callable[[Any], LazySequence]:
    """Running fold from the left: yields fn(acc, x) after every element"""
    def _scan_left(xs):
        return lazy(xs).scan_left(fn, seed)
    return _scan_left


def scan_right(fn: Callable[[Any, Any], Any], seed: Any) -> Callable[[Any], LazySequence]:
    """
    Running fold from the right with fn(x, acc). Element i of the result is
    the right fold of xs[i:]. Reads the whole input on the first pull.
    """
    def _scan_right(xs):
        return lazy(xs).scan_right(fn, seed)
    return _scan_right


def limit(n: int) -> Callable[[Any], LazySequence]:
    check_count("limit", n, 0)

    def _limit(xs):
        return lazy(xs).take(n)
    return _limit


def skip(n: int) -> Callable[[Any], LazySequence]:
    check_count("skip count", n, 0)

    def _skip(xs):
        return lazy(xs).skip(n)
    return _skip


def batch(size: Optional[int] = None) -> Callable[[Any], LazySequence]:
    """Fixed-size lists in encounter order; the last one may be shorter"""
    if size is None:
        size = get_settings().default_batch_size
    check_count("batch size", size, 1)

    def _batch(xs):
        return lazy(xs).batch(size)
    return _batch


def enumerate(xs: Any) -> LazySequence:
    return lazy(xs).enumerate()


# --------- folds ----------

def fold_left(fn: Callable[[Any, Any], Any], seed: Any) -> Callable[[Any], Any]:
    """Streams the input, acc = fn(acc, x)"""
    def _fold_left(xs):
        acc = seed
        for x in lazy(xs):
            acc = fn(acc, x)
        return acc
    return _fold_left


def fold_right(fn: Callable[[Any, Any], Any], seed: Any) -> Callable[[Any], Any]:
    """Materializes the input then folds from the last element, acc = fn(x, acc)"""
    def _fold_right(xs):
        items = list(lazy(xs))
        logger.debug(f"fold_right materialized {len(items)} elements")
        acc = seed
        for x in reversed(items):
            acc = fn(x, acc)
        return acc
    return _fold_right


# --------- grouping ----------

def group(pluck: Optional[Callable] = None, *key_fns: Callable) -> Callable[[Any], Any]:
    """
    Bucket elements by key_fns[0], then each bucket by key_fns[1], and so on.
    Buckets are dicts in first-seen key order; the innermost lists hold
    pluck(x) (identity when pluck is None). No key functions returns the
    input unchanged.
    """
    pluck = pluck or _identity

    def _group(xs):
        if not key_fns:
            return xs
        key_fn, rest = key_fns[0], key_fns[1:]
        buckets: Dict[Any, Any] = {}
        for x in lazy(xs):
            buckets.setdefault(key_fn(x), []).append(x)
        for key, bucket in buckets.items():
            if rest:
                buckets[key] = group(pluck, *rest)(bucket)
            else:
                buckets[key] = [pluck(x) for x in bucket]
        return buckets
    return _group


def partition(*predicates: Callable[[Any], bool]) -> Callable[[Any], List[List[Any]]]:
    """
    One bucket per predicate; each element goes to the first predicate it
    satisfies. Elements matching none are dropped.
    """
    if not predicates:
        raise config_error("partition needs at least one predicate")

    def _partition(xs):
        buckets = [[] for _ in predicates]
        for x in lazy(xs):
            for bucket, pred in zip(buckets, predicates):
                if pred(x):
                    bucket.append(x)
                    break
        return buckets
    return _partition


def boolean_partition(pred: Callable[[Any], bool]) -> Callable[[Any], List[List[Any]]]:
    """[trues, falses]"""
    def _boolean_partition(xs):
        trues, falses = [], []
        for x in lazy(xs):
            (trues if pred(x) else falses).append(x)
        return [trues, falses]
    return _boolean_partition


def distinct(xs: Any) -> List[Any]:
    """Unique elements in first-seen order, compared by value"""
    seen = builtins.set()
    unhashable = []
    result = []
    for x in lazy(xs):
        try:
            if x in seen:
                continue
            seen.add(x)
        except TypeError:
            if any(x == other for other in unhashable):
                continue
            unhashable.append(x)
        result.append(x)
    return result


def frequencies(xs: Any) -> Dict[Any, int]:
    """
    Occurrences of each element, in first-seen order. Elements become dict
    keys, so an unhashable one raises UnsupportedShape.
    """
    counts: Dict[Any, int] = {}
    for x in lazy(xs):
        try:
            counts[x] = counts.get(x, 0) + 1
        except TypeError:
            raise UnsupportedShape("frequencies", classify(x), x) from None
    return counts


# --------- alists, mappings and records ----------

def alist_to_mapping(alist: Iterable) -> Dict[Any, Any]:
    result = {}
    for key, value in alist:
        result[key] = value
    return result


def alist_to_record(alist: Iterable) -> Record:
    return Record.from_pairs(alist)


def plist_to_alist(xs: Any) -> LazySequence:
    """Pair up consecutive elements: [k1, v1, k2, v2] -> (k1, v1), (k2, v2)"""
    def _pairs():
        it = iter(lazy(xs))
        return zip(it, it)
    return LazySequence(Restartable(_pairs), handle=xs)


def _require(shape: Shape, operation: str, x: Any) -> None:
    actual = classify(x)
    if actual is not shape:
        raise UnsupportedShape(operation, actual, x)


def map_mapping(fn: Callable) -> Callable[[Any], Dict[Any, Any]]:
    """fn maps each (key, value) entry to a new (key, value) entry"""
    def _map_mapping(x):
        _require(Shape.MAPPING, "map_mapping", x)
        return alist_to_mapping(map(fn)(entries(x)))
    return _map_mapping


def filter_mapping(pred: Callable) -> Callable[[Any], Dict[Any, Any]]:
    def _filter_mapping(x):
        _require(Shape.MAPPING, "filter_mapping", x)
        return alist_to_mapping(filter(pred)(entries(x)))
    return _filter_mapping


def map_record(fn: Callable) -> Callable[[Any], Record]:
    def _map_record(x):
        _require(Shape.RECORD, "map_record", x)
        return alist_to_record(map(fn)(entries(x)))
    return _map_record


def filter_record(pred: Callable) -> Callable[[Any], Record]:
    def _filter_record(x):
        _require(Shape.RECORD, "filter_record", x)
        return alist_to_record(filter(pred)(entries(x)))
    return _filter_record


def to_dict(key: Callable, val: Optional[Callable] = None) -> Callable[[Any], Dict[Any, Any]]:
    """Index elements by key(x), storing val(x) or x itself"""
    def _to_dict(xs):
        return {key(x): (val(x) if val else x) for x in lazy(xs)}
    return _to_dict


def to_record(key: Callable, val: Optional[Callable] = None) -> Callable[[Any], Record]:
    def _to_record(xs):
        return Record.from_pairs((key(x), val(x) if val else x) for x in lazy(xs))
    return _to_record


# --------- eager sequence helpers ----------

def map_array(fn: Callable) -> Callable[[Any], List[Any]]:
    def _map_array(xs):
        return list(map(fn)(xs))
    return _map_array


def filter_array(pred: Callable) -> Callable[[Any], List[Any]]:
    def _filter_array(xs):
        return list(filter(pred)(xs))
    return _filter_array


def array(xs: Any) -> List[Any]:
    return list(lazy(xs))


def sort(comparator: Callable[[Any, Any], int]) -> Callable[[Any], List[Any]]:
    """Stable sort of a copy; comparator returns -1, 0 or 1"""
    key = functools.cmp_to_key(comparator)

    def _sort(xs):
        result = sorted(lazy(xs), key=key)
        logger.debug(f"sort materialized {len(result)} elements")
        return result
    return _sort


def reverse(xs: Any) -> Any:
    if isinstance(xs, (str, bytes)):
        return xs[::-1]
    return list(lazy(xs))[::-1]


def join(separator: str) -> Callable[[Any], str]:
    def _join(xs):
        return separator.join(str(x) for x in lazy(xs))
    return _join


def find(pred: Callable[[Any], bool]) -> Callable[[Any], Any]:
    def _find(xs):
        return lazy(xs).find(pred)
    return _find


def find_index(pred: Callable[[Any], bool]) -> Callable[[Any], Optional[int]]:
    def _find_index(xs):
        for index, x in builtins.enumerate(lazy(xs)):
            if pred(x):
                return index
        return None
    return _find_index


def every(pred: Callable[[Any], bool]) -> Callable[[Any], bool]:
    def _every(xs):
        return lazy(xs).all(pred)
    return _every


def some(pred: Callable[[Any], bool]) -> Callable[[Any], bool]:
    def _some(xs):
        return lazy(xs).any(pred)
    return _some


def each(fn: Callable) -> Callable[[Any], Any]:
    """Call fn(element, index, source) for its effect; returns the input"""
    call = fit_arity(fn, 3)

    def _each(xs):
        for index, x in builtins.enumerate(lazy(xs)):
            call(x, index, xs)
        return xs
    return _each


def apply(fns: Sequence[Callable]) -> Callable[[Any], List[Any]]:
    def _apply(x):
        return [fn(x) for fn in fns]
    return _apply


def construct(fn: Callable, n: int = 1) -> List[Any]:
    """Build a list of n elements with fn(index, n, built_so_far)"""
    check_count("construct size", n, 0)
    call = fit_arity(fn, 3)
    built: List[Any] = []
    for index in range(n):
        built.append(call(index, n, built))
    return built


def first(xs: Any) -> Any:
    return lazy(xs).first()


def second(xs: Any) -> Any:
    return lazy(xs).skip(1).first()


def last(xs: Any) -> Any:
    return lazy(xs).last()


def head(xs: Any) -> List[Any]:
    """Everything but the last element"""
    return list(lazy(xs))[:-1]


def tail(xs: Any) -> List[Any]:
    """Everything but the first element"""
    return list(lazy(xs).skip(1))


def total(xs: Any) -> Any:
    return lazy(xs).sum()


def average(xs: Any) -> float:
    return statistics.fmean(lazy(xs))


def array_push(x: Any) -> Callable[[Any], List[Any]]:
    """Copy of the sequence with x appended"""
    def _array_push(xs):
        return [*lazy(xs), x]
    return _array_push


def swap(i: int, j: int) -> Callable[[Any], List[Any]]:
    """Copy of the sequence with positions i and j exchanged"""
    def _swap(xs):
        items = list(lazy(xs))
        items[i], items[j] = items[j], items[i]
        return items
    return _swap


def split(separator: str) -> Callable[[str], List[str]]:
    def _split(s):
        return s.split(separator)
    return _split


def starts_with(prefix: str) -> Callable[[str], bool]:
    def _starts_with(s):
        return s.startswith(prefix)
    return _starts_with


def ends_with(suffix: str) -> Callable[[str], bool]:
    def _ends_with(s):
        return s.endswith(suffix)
    return _ends_with


# --------- add ----------

def _chain(a, b) -> LazySequence:
    return LazySequence(Restartable(lambda: itertools.chain(a, b)))


def add(a: Any) -> Callable[[Any], Any]:
    """
    add(a)(b) combines a and b by a's shape: numbers add, strings
    concatenate, sequences concatenate (lazily when either side is lazy),
    mappings and records merge with b's values overwriting a's. None on
    either side gives None.
    """
    def _add(b):
        if a is None or b is None:
            return None
        return dispatch(
            a, "add",
            scalar=lambda _: _add_scalars(a, b),
            sequence=lambda _: _chain(a, b) if is_lazy(a) or is_lazy(b) else [*a, *b],
            mapping=lambda _: {**a, **dict(entries(b))},
            record=lambda _: Record.from_pairs(entries(a) + entries(b)),
        )
    return _add


def _add_scalars(a, b):
    if isinstance(a, (int, float, complex, str, bytes)):
        return a + b
    raise UnsupportedShape("add", Shape.SCALAR, a)


def addr(a: Any) -> Callable[[Any], Any]:
    """add with the operands flipped: addr(a)(b) == add(b)(a)"""
    def _addr(b):
        return add(b)(a)
    return _addr
