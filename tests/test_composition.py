import pytest

import accessors as acc
import combinators as fp
from composition import (
    K, T, and_, arrow, attempt, by, cond, defined, do_nothing, identity,
    ifelse, is_, isnt, like, maybe, maybe_or, not_, nothing, or_, pipe,
    reject, something, spread, tap, unlike, unspread, valmap, when,
)


class TestPipelines:
    """Test pipe, arrow and friends"""

    def test_pipe_runs_left_to_right(self):
        result = pipe(
            range(1, 11),
            fp.filter(lambda x: x % 2 == 0),
            fp.map(lambda x: x * x),
            fp.total,
        )
        assert result == 4 + 16 + 36 + 64 + 100

    def test_pipe_without_functions_is_identity(self):
        data = [1]
        assert pipe(data) is data

    def test_arrow_builds_reusable_function(self):
        shout = arrow(str.strip, str.upper, lambda s: s + "!")
        assert shout("  hi ") == "HI!"
        assert arrow()(5) == 5

    def test_spread_and_unspread(self):
        assert spread(lambda a, b: a - b)([5, 3]) == 2
        assert unspread(fp.total)(1, 2, 3) == 6

    def test_tap_returns_same_object(self):
        seen = []
        data = {"a": 1}
        assert tap(seen.append)(data) is data
        assert seen == [data]

    def test_constants(self):
        assert K(7)("ignored", 1) == 7
        assert T(3)(lambda x: x + 1) == 4
        assert identity("x") == "x"
        assert do_nothing(1, 2) is False


class TestBranching:
    """Test ifelse, when, cond and valmap"""

    def test_ifelse(self):
        sign = ifelse(lambda x: x >= 0, K("+"), K("-"))
        assert [sign(x) for x in (3, 0, -2)] == ["+", "+", "-"]

    def test_when(self):
        double_odd = when(lambda x: x % 2)(lambda x: x * 2)
        assert fp.map_array(double_odd)([1, 2, 3]) == [2, 2, 6]

    def test_cond_first_passing_test(self):
        classify_number = cond(
            lambda x: x < 0, K("negative"),
            lambda x: x == 0, K("zero"),
            K("positive"),
        )
        assert classify_number(-1) == "negative"
        assert classify_number(0) == "zero"
        assert classify_number(9) == "positive"

    def test_cond_passes_through_without_default(self):
        assert cond(lambda x: x > 10, K("big"))(3) == 3

    def test_valmap(self):
        grade = valmap("a", 4, "b", 3, 0)
        assert [grade(g) for g in ("a", "b", "f")] == [4, 3, 0]
        assert valmap(1, "one")(2) == 2


class TestOptional:
    """Test None-aware helpers"""

    def test_maybe(self):
        describe = maybe(lambda x: f"got {x}", K("nothing"))
        assert describe(1) == "got 1"
        assert describe(None) == "nothing"
        assert describe(0) == "got 0", "Only None counts as missing"

    def test_maybe_or(self):
        double = maybe_or(lambda x: x * 2, default=-1)
        assert double(4) == 8
        assert double(None) == -1

    def test_nothing_and_something(self):
        assert nothing(K("fallback"))(None) == "fallback"
        assert nothing(K("fallback"))(1) == 1
        assert something(str)(5) == "5"
        assert something(str)(None) is None

    def test_maybe_after_lenient_get(self):
        name = arrow(acc.get("user", "name"), maybe_or(str.title, "anonymous"))
        assert name({"user": {"name": "ann"}}) == "Ann"
        assert name({}) == "anonymous"


class TestErrorsAsValues:
    """Test attempt and reject"""

    def test_attempt_returns_exception(self):
        result = attempt(lambda: 1 / 0)
        assert isinstance(result, ZeroDivisionError)
        assert attempt(lambda: 42) == 42

    def test_reject_raises_built_error(self):
        positive = reject(lambda x: x <= 0, lambda x: ValueError(f"not positive: {x}"))
        assert positive(3) == 3
        with pytest.raises(ValueError, match="not positive: -1"):
            positive(-1)


class TestPredicates:
    """Test logic and equality helpers"""

    def test_strict_and_loose_equality(self):
        assert is_(1)(1) is True
        assert is_(1)(1.0) is False
        assert is_(1)(True) is False
        assert like(1)(1.0) is True
        assert isnt("1")(1) is True
        assert unlike(1)(2) is True

    def test_logic(self):
        assert not_(0) is True
        assert and_(1)(0) is False
        assert or_(0)("x") is True
        assert defined(0) is True
        assert defined(None) is False

    def test_by_orders_descending_with_negated_key(self):
        assert fp.sort(by(lambda x: -x))([1, 3, 2]) == [3, 2, 1]
