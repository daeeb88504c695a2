import pytest

import combinators as fp
from composition import arrow, pipe
from lazy import LazySequence


class TestComposability:
    """Test operation composability, method chaining and curried pipelines"""

    def test_method_chaining(self):
        """Test that methods can be chained together"""
        result = (
            LazySequence(range(20))
            .map(lambda x: x * 2)
            .filter(lambda x: x > 10)
            .skip(3)
            .take(5)
            .to_list()
        )

        expected = [18, 20, 22, 24, 26]
        assert result == expected, f"Expected {expected}, got {result}"

    def test_curried_pipeline_matches_chaining(self):
        """Test that pipe over curried combinators equals method chaining"""
        result = pipe(
            range(20),
            fp.map(lambda x: x * 2),
            fp.filter(lambda x: x > 10),
            fp.skip(3),
            fp.limit(5),
            fp.array,
        )
        assert result == [18, 20, 22, 24, 26], f"Unexpected result: {result}"

    def test_arrow_builds_reusable_pipeline(self):
        """Test that arrow composes left to right into a reusable function"""
        evens_squared = arrow(
            fp.filter(lambda x: x % 2 == 0),
            fp.map(lambda x: x * x),
            fp.array,
        )
        assert evens_squared(range(7)) == [0, 4, 16, 36]
        assert evens_squared([1, 3, 4]) == [16]

    def test_map_identity_preserves_sequence(self):
        """Test that map(identity) yields the same elements in the same order"""
        for xs in ([], [3, 1, 2], ["a", None, 2.5], list(range(50))):
            assert list(fp.map(lambda x: x)(xs)) == xs

    def test_map_receives_index_and_source(self):
        """Test the (element, index, source) calling convention"""
        source = ["a", "b", "c"]
        calls = list(fp.map(lambda x, i, xs: (x, i, xs is source))(source))
        assert calls == [("a", 0, True), ("b", 1, True), ("c", 2, True)]

    def test_map_with_two_parameters(self):
        """Test that a two-parameter function receives element and index"""
        assert list(fp.map(lambda x, i: f"{i}:{x}")(["a", "b"])) == ["0:a", "1:b"]

    def test_map_with_builtin(self):
        """Test that builtins without a readable signature get just the element"""
        assert list(fp.map(str)([1, 2])) == ["1", "2"]
        assert list(fp.map(abs)([-1, 2])) == [1, 2]

    def test_filter_index_is_source_index(self):
        """Test that filter passes the position in the source, not in the output"""
        seen = []

        def keep_odd_positions(x, i):
            seen.append(i)
            return i % 2 == 1

        result = list(fp.filter(keep_odd_positions)(["a", "b", "c", "d"]))
        assert result == ["b", "d"]
        assert seen == [0, 1, 2, 3]

    def test_chained_map_source_is_upstream_sequence(self):
        """Test that a chained step receives the sequence it was applied to"""
        first = LazySequence([1, 2]).map(lambda x: x + 1)
        handles = list(first.map(lambda x, i, src: src is first))
        assert handles == [True, True]

    def test_multiple_maps(self):
        """Test composing multiple map operations"""
        result = (
            LazySequence([1, 2, 3, 4, 5])
            .map(lambda x: x * 2)
            .map(lambda x: x + 1)
            .map(lambda x: x * 3)
            .to_list()
        )

        expected = [9, 15, 21, 27, 33]  # ((x*2)+1)*3
        assert result == expected, f"Expected {expected}, got {result}"

    def test_multiple_filters(self):
        """Test composing multiple filter operations"""
        result = (
            LazySequence(range(20))
            .filter(lambda x: x % 2 == 0)
            .filter(lambda x: x % 3 == 0)
            .filter(lambda x: x > 5)
            .to_list()
        )

        assert result == [6, 12, 18], f"Unexpected result: {result}"

    def test_skip_and_take_composition(self):
        """Test composing skip and take operations"""
        result = (
            LazySequence(range(20))
            .skip(5)
            .take(10)
            .skip(2)
            .take(5)
            .to_list()
        )

        assert result == [7, 8, 9, 10, 11], f"Unexpected result: {result}"

    def test_composability_with_empty_results(self):
        """Test composability when intermediate operations produce empty results"""
        result = (
            LazySequence([1, 2, 3, 4, 5])
            .filter(lambda x: x > 10)
            .map(lambda x: x * 2)
            .take(3)
            .to_list()
        )

        assert result == [], f"Expected empty list, got {result}"

    def test_each_step_returns_new_sequence(self):
        """Test that chaining never mutates the sequence it started from"""
        base = LazySequence([1, 2, 3])
        doubled = base.map(lambda x: x * 2)

        assert base is not doubled
        assert base.to_list() == [1, 2, 3]
        assert doubled.to_list() == [2, 4, 6]

    def test_mapping_is_seen_as_entries(self):
        """Test that sequence combinators see a mapping as its (key, value) entries"""
        prices = {"apple": 3, "pear": 5}
        result = list(fp.map(lambda entry: entry[1] * 2)(prices))
        assert result == [6, 10]
        assert list(fp.enumerate(prices)) == [(0, ("apple", 3)), (1, ("pear", 5))]

    def test_operation_order_matters(self):
        """Test that the order of operations affects the result"""
        data = range(10)

        result1 = LazySequence(data).filter(lambda x: x > 5).map(lambda x: x * 2).to_list()
        result2 = LazySequence(data).map(lambda x: x * 2).filter(lambda x: x > 5).to_list()

        assert result1 == [12, 14, 16, 18], f"Result1 unexpected: {result1}"
        assert result2 == [6, 8, 10, 12, 14, 16, 18], f"Result2 unexpected: {result2}"
