"""Point-free glue for chaining combinators and caller functions."""

from typing import Any, Callable


def identity(x: Any) -> Any:
    return x


def K(x: Any) -> Callable[..., Any]:
    """Constant function: ignores its arguments and returns x"""
    return lambda *_: x


def T(x: Any) -> Callable[[Callable], Any]:
    """Thrush: T(x)(f) == f(x)"""
    return lambda fn: fn(x)


def do_nothing(*_) -> bool:
    return False


def tap(fn: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Call fn(x) for its effect and return x itself"""
    def _tap(x):
        fn(x)
        return x
    return _tap


def pipe(x: Any, *fns: Callable[[Any], Any]) -> Any:
    for fn in fns:
        x = fn(x)
    return x


def arrow(*fns: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Left-to-right composition: arrow(f, g)(x) == g(f(x))"""
    def _arrow(x):
        return pipe(x, *fns)
    return _arrow


def spread(fn: Callable) -> Callable[[Any], Any]:
    """spread(f)([a, b]) == f(a, b)"""
    return lambda args: fn(*args)


def unspread(fn: Callable) -> Callable[..., Any]:
    """unspread(f)(a, b) == f([a, b])"""
    return lambda *args: fn(list(args))


def by(key: Callable[[Any], Any]) -> Callable[[Any, Any], int]:
    """Comparator ordering values by key(x), for use with sort()"""
    def _compare(a, b):
        ka, kb = key(a), key(b)
        if ka == kb:
            return 0
        return -1 if ka < kb else 1
    return _compare


def ifelse(test: Callable, ok: Callable, bad: Callable) -> Callable[[Any], Any]:
    def _ifelse(x):
        return ok(x) if test(x) else bad(x)
    return _ifelse


def when(test: Callable) -> Callable[[Callable], Callable[[Any], Any]]:
    """when(test)(fn)(x) applies fn only when test(x) holds"""
    def _with(fn):
        return lambda x: fn(x) if test(x) else x
    return _with


def cond(*clauses: Callable) -> Callable[[Any], Any]:
    """
    cond(test1, fn1, test2, fn2, ..., [default]): apply the fn paired with the
    first passing test. With an odd number of arguments the last one is the
    fallback; otherwise unmatched values pass through.
    """
    paired = len(clauses) - len(clauses) % 2

    def _cond(x):
        for i in range(0, paired, 2):
            if clauses[i](x):
                return clauses[i + 1](x)
        return x if paired == len(clauses) else clauses[-1](x)
    return _cond


def valmap(*clauses: Any) -> Callable[[Any], Any]:
    """
    valmap(v1, r1, v2, r2, ..., [default]): replace x with the r paired with
    the first v equal to x. Odd argument count makes the last one the default.
    """
    paired = len(clauses) - len(clauses) % 2

    def _valmap(x):
        for i in range(0, paired, 2):
            if clauses[i] == x:
                return clauses[i + 1]
        return x if paired == len(clauses) else clauses[-1]
    return _valmap


def maybe(good: Callable, bad: Callable) -> Callable[[Any], Any]:
    """bad(x) when x is None, good(x) otherwise"""
    def _maybe(x):
        return bad(x) if x is None else good(x)
    return _maybe


def maybe_or(fn: Callable, default: Any = None) -> Callable[[Any], Any]:
    """fn(x), or default when x is None"""
    def _maybe_or(x):
        return default if x is None else fn(x)
    return _maybe_or


def nothing(fn: Callable) -> Callable[[Any], Any]:
    """Replace None with fn(None); other values pass through"""
    return lambda x: fn(x) if x is None else x


def something(fn: Callable) -> Callable[[Any], Any]:
    """Apply fn to values that aren't None"""
    return lambda x: x if x is None else fn(x)


def attempt(fn: Callable[[], Any]) -> Any:
    """Call fn(); an Exception it raises is returned instead of propagated"""
    try:
        return fn()
    except Exception as e:
        return e


def reject(test: Callable, make_error: Callable[[Any], Exception]) -> Callable[[Any], Any]:
    """Raise make_error(x) when test(x) holds, otherwise return x"""
    def _reject(x):
        if test(x):
            raise make_error(x)
        return x
    return _reject


def defined(x: Any) -> bool:
    return x is not None


def not_(x: Any) -> bool:
    return not x


def and_(a: Any) -> Callable[[Any], bool]:
    return lambda b: bool(b and a)


def or_(a: Any) -> Callable[[Any], bool]:
    return lambda b: bool(b or a)


def is_(a: Any) -> Callable[[Any], bool]:
    """Strict equality: same type and equal value"""
    return lambda b: a is b or (type(a) is type(b) and a == b)


def isnt(a: Any) -> Callable[[Any], bool]:
    return lambda b: not is_(a)(b)


def like(a: Any) -> Callable[[Any], bool]:
    """Loose equality"""
    return lambda b: a == b


def unlike(a: Any) -> Callable[[Any], bool]:
    return lambda b: a != b
