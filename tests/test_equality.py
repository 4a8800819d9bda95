"""Tests for the equality checks."""

from dataclasses import dataclass

from selkt import deep_equal, shallow_equal, shallow_equal_array, strict_equal


@dataclass
class Point:
    x: int
    y: int


class TestStrictEqual:
    def test_primitives(self):
        assert strict_equal(1, 1)
        assert strict_equal("a", "a")
        assert strict_equal(None, None)
        assert not strict_equal(1, 2)

    def test_no_coercion_across_types(self):
        assert not strict_equal(0, False)
        assert not strict_equal(1, True)
        assert not strict_equal(1, 1.0)
        assert not strict_equal("1", 1)
        assert not strict_equal(b"a", "a")
        assert strict_equal(True, True)
        assert strict_equal(1.5, 1.5)

    def test_containers_compare_by_identity(self):
        a = [1, 2]
        assert strict_equal(a, a)
        assert not strict_equal([1, 2], [1, 2])
        assert not strict_equal({}, {})


class TestShallowEqualArray:
    def test_checks_correctly(self):
        a = {}
        assert shallow_equal_array([1, 2, 3], [1, 2, 3]) is True
        assert shallow_equal_array([], [1, 2, 3]) is False
        assert shallow_equal_array([a], [a]) is True
        assert shallow_equal_array([{}], [{}]) is False
        assert shallow_equal_array([True, False], [False, True]) is False

    def test_from_index_skips_prefix(self):
        assert shallow_equal_array([True, True], [False, True], 1) is True
        assert shallow_equal_array([True, True], [False, False], 1) is False

    def test_none(self):
        assert shallow_equal_array(None, None) is True
        assert shallow_equal_array([], None) is False
        assert shallow_equal_array(None, [1]) is False

    def test_tuples(self):
        assert shallow_equal_array((1, "a"), (1, "a")) is True
        assert shallow_equal_array((1,), (1, 2)) is False


class TestShallowEqual:
    def test_checks_correctly(self):
        assert shallow_equal({}, {}) is True
        assert shallow_equal({}, None) is False
        assert shallow_equal({"a": True}, {"a": True}) is True
        assert shallow_equal({"a": False, "test": False}, {"a": True}) is False
        assert shallow_equal({"a": False, "test": False}, None) is False

    def test_same_count_different_keys(self):
        assert shallow_equal({"a": 1}, {"b": 1}) is False

    def test_nested_values_compared_by_identity(self):
        inner = {"c": 1}
        assert shallow_equal({"b": inner}, {"b": inner}) is True
        assert shallow_equal({"b": {"c": 1}}, {"b": {"c": 1}}) is False

    def test_objects_compare_attributes(self):
        assert shallow_equal(Point(1, 2), Point(1, 2)) is True
        assert shallow_equal(Point(1, 2), Point(1, 3)) is False


class TestDeepEqual:
    def test_checks_correctly(self):
        assert deep_equal({"a": {"b": {"c": True}}}, {"a": {"b": {"c": True}}}) is True
        assert deep_equal({"a": {"b": {"c": False}}}, {"a": {"b": {"c": True}}}) is False
        assert deep_equal([{}], [{}]) is True
        assert deep_equal({}, None) is False
        assert deep_equal({}, {"test": True}) is False

    def test_mixed_nesting(self):
        a = {"users": [{"id": 1, "tags": ["x"]}, {"id": 2, "tags": []}]}
        b = {"users": [{"id": 1, "tags": ["x"]}, {"id": 2, "tags": []}]}
        assert deep_equal(a, b) is True
        b["users"][1]["tags"].append("y")
        assert deep_equal(a, b) is False

    def test_objects(self):
        assert deep_equal({"p": Point(1, 2)}, {"p": Point(1, 2)}) is True
        assert deep_equal({"p": Point(1, 2)}, {"p": Point(2, 1)}) is False

    def test_strings_are_not_recursed(self):
        assert deep_equal({"a": "xy"}, {"a": "xy"}) is True
        assert deep_equal({"a": "xy"}, {"a": "yx"}) is False
