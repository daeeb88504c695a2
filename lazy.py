"""
Lazy sequences.

A LazySequence stores its transformation steps and only runs them when it is
iterated. Each step is an explicit pull-based iterator wrapping the one
upstream of it, so a consumer that stops pulling stops all upstream work.
"""

import itertools
import logging
from typing import Any, Callable, Iterator, Optional

from models import Shape
from shapes import classify, dispatch, elements
from utils import config_error, fit_arity

logger = logging.getLogger(__name__)

_MISSING = object()


# --------- pull-based iterators ----------

class MapIterator:
    """Yields fn(element, index, source) for each upstream element."""

    def __init__(self, upstream: Iterator, fn: Callable, source: Any = None):
        self._upstream = upstream
        self._fn = fit_arity(fn, 3)
        self._source = source
        self._index = 0

    def __iter__(self):
        return self

    def __next__(self):
        x = next(self._upstream)
        index = self._index
        self._index += 1
        return self._fn(x, index, self._source)


class FilterIterator:
    """Yields upstream elements for which pred(element, index, source) holds."""

    def __init__(self, upstream: Iterator, pred: Callable, source: Any = None):
        self._upstream = upstream
        self._pred = fit_arity(pred, 3)
        self._source = source
        self._index = 0

    def __iter__(self):
        return self

    def __next__(self):
        while True:
            x = next(self._upstream)
            index = self._index
            self._index += 1
            if self._pred(x, index, self._source):
                return x


class FlattenIterator:
    """Descends into sequence-shaped elements up to `depth` levels."""

    def __init__(self, upstream: Iterator, depth: int):
        self._stack = [(upstream, depth)]

    def __iter__(self):
        return self

    def __next__(self):
        while self._stack:
            it, depth = self._stack[-1]
            try:
                x = next(it)
            except StopIteration:
                self._stack.pop()
                continue
            if depth > 0 and classify(x) is Shape.SEQUENCE:
                self._stack.append((iter(x), depth - 1))
                continue
            return x
        raise StopIteration


class FlattenUntilIterator:
    """Descends into sequence-shaped elements until pred(element) holds."""

    def __init__(self, upstream: Iterator, pred: Callable):
        self._stack = [upstream]
        self._pred = pred

    def __iter__(self):
        return self

    def __next__(self):
        while self._stack:
            try:
                x = next(self._stack[-1])
            except StopIteration:
                self._stack.pop()
                continue
            if not self._pred(x) and classify(x) is Shape.SEQUENCE:
                self._stack.append(iter(x))
                continue
            return x
        raise StopIteration


class ScanLeftIterator:
    """Yields the running accumulator acc = fn(acc, element)."""

    def __init__(self, upstream: Iterator, fn: Callable, seed: Any):
        self._upstream = upstream
        self._fn = fn
        self._acc = seed

    def __iter__(self):
        return self

    def __next__(self):
        x = next(self._upstream)
        self._acc = self._fn(self._acc, x)
        return self._acc


class ScanRightIterator:
    """
    Yields, for each position i, the right fold of elements[i:] with
    acc = fn(element, acc).

    Not lazy: the whole upstream is read on the first pull, so this never
    returns on an infinite source.
    """

    def __init__(self, upstream: Iterator, fn: Callable, seed: Any):
        self._upstream = upstream
        self._fn = fn
        self._seed = seed
        self._results: Optional[Iterator] = None

    def __iter__(self):
        return self

    def __next__(self):
        if self._results is None:
            items = list(self._upstream)
            logger.debug(f"scan_right materialized {len(items)} elements")
            acc = self._seed
            folded = []
            for x in reversed(items):
                acc = self._fn(x, acc)
                folded.append(acc)
            folded.reverse()
            self._results = iter(folded)
        return next(self._results)


class LimitIterator:
    """Yields at most n elements and never pulls the n+1th."""

    def __init__(self, upstream: Iterator, n: int):
        self._upstream = upstream
        self._remaining = n

    def __iter__(self):
        return self

    def __next__(self):
        if self._remaining <= 0:
            raise StopIteration
        x = next(self._upstream)
        self._remaining -= 1
        return x


class SkipIterator:
    """Drops the first n elements."""

    def __init__(self, upstream: Iterator, n: int):
        self._upstream = upstream
        self._pending = n

    def __iter__(self):
        return self

    def __next__(self):
        while self._pending > 0:
            next(self._upstream)
            self._pending -= 1
        return next(self._upstream)


class BatchIterator:
    """Groups elements into lists of `size`; the last list may be shorter."""

    def __init__(self, upstream: Iterator, size: int):
        self._upstream = upstream
        self._size = size

    def __iter__(self):
        return self

    def __next__(self):
        bucket = []
        for x in self._upstream:
            bucket.append(x)
            if len(bucket) == self._size:
                break
        if not bucket:
            raise StopIteration
        return bucket


class EnumerateIterator:
    """Yields (index, element) pairs."""

    def __init__(self, upstream: Iterator):
        self._upstream = upstream
        self._index = 0

    def __iter__(self):
        return self

    def __next__(self):
        x = next(self._upstream)
        index = self._index
        self._index += 1
        return (index, x)


class IterateIterator:
    """Infinite producer of seed, fn(seed), fn(fn(seed)), ..."""

    def __init__(self, fn: Callable, seed: Any):
        self._fn = fn
        self._next = seed
        self._started = False

    def __iter__(self):
        return self

    def __next__(self):
        if self._started:
            self._next = self._fn(self._next)
        self._started = True
        return self._next


class Restartable:
    """Iterable that asks a factory for a fresh iterator on every pass."""

    def __init__(self, factory: Callable[[], Iterator]):
        self._factory = factory

    def __iter__(self):
        return iter(self._factory())


_STAGES = {
    "map": lambda it, arg: MapIterator(it, *arg),
    "filter": lambda it, arg: FilterIterator(it, *arg),
    "flatten": FlattenIterator,
    "flatten_until": FlattenUntilIterator,
    "scan_left": lambda it, arg: ScanLeftIterator(it, *arg),
    "scan_right": lambda it, arg: ScanRightIterator(it, *arg),
    "skip": SkipIterator,
    "take": LimitIterator,
    "batch": BatchIterator,
    "enumerate": lambda it, arg: EnumerateIterator(it),
}


def check_count(name: str, n: Any, minimum: int) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise config_error(f"{name} must be an integer, got {n!r}")
    if n < minimum:
        raise config_error(f"{name} must be >= {minimum}, got {n}")
    return n


class LazySequence:
    """
    A chainable, lazy sequence. Transformations are stored and applied
    only when you iterate. Optionally caches realized results.

    A LazySequence can be iterated again when its source can (lists, ranges,
    Restartable factories); over an iterator or generator it is single-pass.
    """
    def __init__(self, source, ops=None, cache_enabled=False, handle=_MISSING):
        self._source = source
        self._ops = ops or []          # sequence of ("op_name", arg)
        self._cache_enabled = cache_enabled
        self._cache = []               # realized items (post-ops)
        self._live = None              # pipeline feeding the cache
        self._exhausted = False
        self._handle = source if handle is _MISSING else handle

    # --------- chainable operators (lazy) ----------
    def map(self, fn):
        return self._with_op(("map", (fn, self._current_handle())))

    def filter(self, pred):
        return self._with_op(("filter", (pred, self._current_handle())))

    def flatten(self, depth=1):
        return self._with_op(("flatten", check_count("flatten depth", depth, 0)))

    def flatten_until(self, pred):
        return self._with_op(("flatten_until", pred))

    def scan_left(self, fn, seed):
        return self._with_op(("scan_left", (fn, seed)))

    def scan_right(self, fn, seed):
        """Right-to-left running fold. Reads the whole source on first pull."""
        return self._with_op(("scan_right", (fn, seed)))

    def skip(self, n):
        return self._with_op(("skip", check_count("skip count", n, 0)))

    def take(self, n):
        return self._with_op(("take", check_count("limit", n, 0)))

    limit = take

    def batch(self, size):
        return self._with_op(("batch", check_count("batch size", size, 1)))

    def chunk(self, size):
        """Alias for batch() - groups elements into chunks of specified size"""
        return self.batch(size)

    def enumerate(self):
        return self._with_op(("enumerate", None))

    def page(self, page_number, page_size):
        """Get a specific page of results (1-indexed)"""
        if page_number < 1:
            raise config_error("Page number must be >= 1")
        offset = (page_number - 1) * page_size
        return self.skip(offset).take(page_size)

    def paginate(self, page_size):
        """Iterate over pages, each a list of up to page_size elements"""
        return iter(self.batch(page_size))

    def cache(self, enabled=True):
        c = self._clone()
        c._cache_enabled = enabled
        return c

    # --------- forcing evaluation ----------
    def to_list(self):
        return list(self)

    # --------- reducing operations (force evaluation) ----------
    def reduce(self, fn, initial=_MISSING):
        """Apply a function of two arguments cumulatively to items, from left to right"""
        it = iter(self)
        if initial is _MISSING:
            try:
                acc = next(it)
            except StopIteration:
                raise TypeError("reduce() of empty sequence with no initial value") from None
        else:
            acc = initial
        for item in it:
            acc = fn(acc, item)
        return acc

    def sum(self, start=0):
        """Return the sum of all elements"""
        total = start
        for item in self:
            total += item
        return total

    def count(self):
        """Return the count of elements"""
        count = 0
        for _ in self:
            count += 1
        return count

    def min(self, default=_MISSING):
        """Return the minimum element"""
        if default is _MISSING:
            return min(self)
        return min(self, default=default)

    def max(self, default=_MISSING):
        """Return the maximum element"""
        if default is _MISSING:
            return max(self)
        return max(self, default=default)

    def first(self, default=None):
        """Return the first element, or default if empty"""
        for item in self:
            return item
        return default

    def last(self, default=None):
        """Return the last element, or default if empty"""
        last_item = default
        for item in self:
            last_item = item
        return last_item

    def any(self, pred=None):
        """Return True if any element is truthy (or satisfies predicate)"""
        if pred is None:
            return any(self)
        return any(pred(x) for x in self)

    def all(self, pred=None):
        """Return True if all elements are truthy (or satisfy predicate)"""
        if pred is None:
            return all(self)
        return all(pred(x) for x in self)

    def find(self, pred):
        """Return the first element that satisfies the predicate, or None"""
        for item in self:
            if pred(item):
                return item
        return None

    def group_by(self, key_fn):
        """Group elements by the result of key_fn"""
        groups = {}
        for item in self:
            groups.setdefault(key_fn(item), []).append(item)
        return groups

    def is_empty(self):
        """True when the sequence yields nothing; pulls at most one element"""
        for _ in self:
            return False
        return True

    def non_empty(self):
        return not self.is_empty()

    # --------- iterator protocol ----------
    def __iter__(self):
        if not self._cache_enabled:
            return self._pipeline()
        return self._cached()

    def _pipeline(self) -> Iterator:
        it = iter(self._source)
        for op, arg in self._ops:
            try:
                stage = _STAGES[op]
            except KeyError:
                raise ValueError(f"Unknown op: {op}") from None
            it = stage(it, arg)
        return it

    def _cached(self):
        position = 0
        while True:
            if position < len(self._cache):
                yield self._cache[position]
                position += 1
                continue
            if self._exhausted:
                return
            if self._live is None:
                self._live = self._pipeline()
            try:
                item = next(self._live)
            except StopIteration:
                self._exhausted = True
                self._live = None
                return
            self._cache.append(item)

    # --------- helpers ----------
    def _current_handle(self):
        return self if self._ops else self._handle

    def _with_op(self, op_tuple):
        return LazySequence(self._source, self._ops + [op_tuple], self._cache_enabled, self._handle)

    def _clone(self):
        # cache is not shared; each pipeline realizes its own results
        return LazySequence(self._source, list(self._ops), self._cache_enabled, self._handle)

    def __repr__(self):
        steps = " -> ".join(op for op, _ in self._ops) or "source"
        return f"LazySequence({steps})"


# --------- producers ----------

def lazy(x: Any) -> LazySequence:
    """Wrap any structured value in a LazySequence over its elements"""
    if isinstance(x, LazySequence):
        return x
    return dispatch(
        x, "lazy",
        sequence=LazySequence,
        mapping=lambda m: LazySequence(Restartable(lambda: elements(m)), handle=m),
        record=lambda r: LazySequence(Restartable(lambda: elements(r)), handle=r),
    )


def seq(start: int, end: int) -> LazySequence:
    """Restartable inclusive integer range start..end"""
    return LazySequence(range(start, end + 1))


def naturals(start: int = 0) -> LazySequence:
    """Restartable infinite counter start, start+1, ..."""
    return LazySequence(Restartable(lambda: itertools.count(start)))


def iterate(fn: Callable, seed: Any) -> LazySequence:
    """Restartable infinite sequence seed, fn(seed), fn(fn(seed)), ..."""
    return LazySequence(Restartable(lambda: IterateIterator(fn, seed)))
