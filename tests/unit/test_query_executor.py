"""Tests for QueryExecutor operators."""

import pytest

from neo_datalayer.application.queries import MISSING, QueryExecutor, get_nested_value


ITEMS = [
    {"id": 1, "name": "Alice", "age": 30, "role": "admin", "active": True, "author": {"name": "John"}},
    {"id": 2, "name": "Bob", "age": 25, "role": "user", "active": False, "author": {"name": "Jane"}},
    {"id": 3, "name": "Carol", "age": None, "role": "user", "active": True, "author": None},
    {"id": 4, "name": "dave", "age": 41, "role": "guest", "flag": 1},
]


def ids(result):
    return [item["id"] for item in result.items]


class TestNestedValue:
    """Tests for dotted path access."""

    def test_nested_paths(self):
        assert get_nested_value("author.name", {"author": {"name": "John"}}) == "John"
        assert get_nested_value("author.name", {"author": None}) is MISSING
        assert get_nested_value("missing.path", {}) is MISSING
        assert get_nested_value("", {"a": 1}) is MISSING


class TestImplicitConditions:
    """Tests for literal and list conditions."""

    def test_empty_query_returns_all(self):
        result = QueryExecutor.execute(ITEMS, {})

        assert result.total == 4
        assert result.items is not ITEMS

    def test_implicit_equality(self):
        assert ids(QueryExecutor.execute(ITEMS, {"role": "user"})) == [2, 3]

    def test_implicit_in_for_lists(self):
        assert ids(QueryExecutor.execute(ITEMS, {"role": ["admin", "guest"]})) == [1, 4]

    def test_nested_field_equality(self):
        assert ids(QueryExecutor.execute(ITEMS, {"author.name": "Jane"})) == [2]

    def test_null_condition_matches_null_and_missing(self):
        assert ids(QueryExecutor.execute(ITEMS, {"age": None})) == [3]
        assert ids(QueryExecutor.execute(ITEMS, {"flag": None})) == [1, 2, 3]

    def test_boolean_never_equals_integer(self):
        assert ids(QueryExecutor.execute(ITEMS, {"active": 1})) == []
        assert ids(QueryExecutor.execute(ITEMS, {"flag": True})) == []
        assert ids(QueryExecutor.execute(ITEMS, {"flag": 1})) == [4]

    def test_fields_combine_with_and(self):
        assert ids(QueryExecutor.execute(ITEMS, {"role": "user", "active": True})) == [3]


class TestOperators:
    """Tests for operator objects."""

    def test_eq_and_ne(self):
        assert ids(QueryExecutor.execute(ITEMS, {"role": {"$eq": "admin"}})) == [1]
        assert ids(QueryExecutor.execute(ITEMS, {"role": {"$ne": "user"}})) == [1, 4]

    def test_comparisons_are_null_safe(self):
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$gt": 28}})) == [1, 4]
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$gte": 30}})) == [1, 4]
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$lt": 30}})) == [2]
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$lte": 30}})) == [1, 2]
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$gt": None}})) == []

    def test_comparisons_require_same_kind(self):
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$gt": "20"}})) == []
        assert ids(QueryExecutor.execute(ITEMS, {"name": {"$gte": "C"}})) == [3, 4]

    def test_range_combination(self):
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$gte": 25, "$lt": 41}})) == [1, 2]

    def test_in_and_nin(self):
        assert ids(QueryExecutor.execute(ITEMS, {"id": {"$in": [1, 3]}})) == [1, 3]
        assert ids(QueryExecutor.execute(ITEMS, {"id": {"$in": []}})) == []
        assert ids(QueryExecutor.execute(ITEMS, {"id": {"$nin": [1, 3]}})) == [2, 4]
        assert ids(QueryExecutor.execute(ITEMS, {"id": {"$nin": []}})) == [1, 2, 3, 4]

    def test_like_is_case_insensitive_substring(self):
        assert ids(QueryExecutor.execute(ITEMS, {"name": {"$like": "A"}})) == [1, 3, 4]
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$like": "4"}})) == [4]

    def test_regex(self):
        assert ids(QueryExecutor.execute(ITEMS, {"name": {"$regex": "^[A-C]"}})) == [1, 2, 3]

    def test_between_is_inclusive(self):
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$between": [25, 30]}})) == [1, 2]
        assert ids(QueryExecutor.execute(ITEMS, {"age": {"$between": [25]}})) == []

    def test_exists(self):
        assert ids(QueryExecutor.execute(ITEMS, {"flag": {"$exists": True}})) == [4]
        assert ids(QueryExecutor.execute(ITEMS, {"flag": {"$exists": False}})) == [1, 2, 3]

    def test_unknown_operator_is_ignored(self):
        assert ids(QueryExecutor.execute(ITEMS, {"role": {"$near": 5, "$eq": "guest"}})) == [4]

    def test_or_and(self):
        query = {"$or": [{"role": "admin"}, {"age": {"$gt": 40}}]}
        assert ids(QueryExecutor.execute(ITEMS, query)) == [1, 4]

        query = {"$and": [{"role": "user"}, {"active": False}]}
        assert ids(QueryExecutor.execute(ITEMS, query)) == [2]

        assert QueryExecutor.execute(ITEMS, {"$or": []}).total == 4


class TestFailSafe:
    """Tests for malformed input handling."""

    def test_invalid_regex_yields_empty_result(self):
        result = QueryExecutor.execute(ITEMS, {"name": {"$regex": "(unclosed"}})

        assert result.items == []
        assert result.total == 0

    def test_non_list_input_yields_empty_result(self):
        assert QueryExecutor.execute(None, {"a": 1}).total == 0
        assert QueryExecutor.execute({"a": 1}, {"a": 1}).total == 0

    def test_does_not_mutate_input(self):
        items = [{"id": 1, "tags": ["a"]}]
        QueryExecutor.execute(items, {"tags": {"$exists": True}})

        assert items == [{"id": 1, "tags": ["a"]}]

    def test_match(self):
        book = {"title": "Vue 3", "status": "published"}

        assert QueryExecutor.match(book, {"status": "published"})
        assert not QueryExecutor.match(book, {"status": "draft"})
        assert QueryExecutor.match(book, {})
        assert not QueryExecutor.match(None, {})


class TestBuildQuery:
    """Tests for building queries from UI filters."""

    @pytest.mark.parametrize("empty", [None, ""])
    def test_drops_empty_values(self, empty):
        assert QueryExecutor.build_query({"status": empty, "genre": 2}) == {"genre": 2}

    def test_keeps_falsy_non_empty_values(self):
        assert QueryExecutor.build_query({"active": False, "count": 0}) == {"active": False, "count": 0}
