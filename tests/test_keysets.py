"""
Tests for key-set algebra.
"""

from docstore.keysets import difference_keys, intersect_keys, is_truthy, union_keys


class TestUnion:

    def test_union_contains_each_key_once(self):
        result = union_keys({"a": 1, "b": 2}, {"b": 3, "c": 4})

        assert sorted(result) == ["a", "b", "c"]
        assert len(result) == len(set(result))

    def test_union_orders_a_then_new_b_keys(self):
        assert union_keys({"x": 1, "a": 1}, {"a": 1, "b": 1}) == ["x", "a", "b"]

    def test_union_ignores_values(self):
        assert union_keys({"a": None}, {"b": 0}) == ["a", "b"]

    def test_union_of_empty_objects(self):
        assert union_keys({}, {}) == []


class TestIntersect:

    def test_falsy_in_first_document_is_excluded(self):
        assert intersect_keys({"a": 1, "b": 0}, {"a": 1, "b": 1}) == ["a"]

    def test_falsy_in_second_document_is_excluded(self):
        assert intersect_keys({"a": 1, "b": 1}, {"a": 1, "b": ""}) == ["a"]

    def test_missing_in_second_document_is_excluded(self):
        assert intersect_keys({"a": 1, "b": 1}, {"a": "x"}) == ["a"]

    def test_sample_people(self):
        scott = {"firstname": "Scott", "lastname": "Roberts", "email": "s", "username": "scoot"}
        andrew = {"firstname": "Andrew", "lastname": "Maney", "email": "a"}

        assert intersect_keys(scott, andrew) == ["firstname", "lastname", "email"]


class TestDifference:

    def test_a_only_keys_then_b_only_keys(self):
        assert difference_keys({"a": 1, "b": 1}, {"b": 1, "c": 1}) == ["a", "c"]

    def test_falsy_value_counts_as_absent(self):
        assert difference_keys({"a": 1, "b": 1}, {"b": None}) == ["a", "b"]

    def test_key_falsy_on_both_sides_appears_in_both_segments(self):
        assert difference_keys({"x": 0}, {"x": False}) == ["x", "x"]

    def test_identical_documents(self):
        assert difference_keys({"a": 1}, {"a": 2}) == []


class TestTruthiness:

    def test_falsy_json_values(self):
        for value in (None, False, 0, 0.0, "", [], {}):
            assert is_truthy(value) is False

    def test_truthy_json_values(self):
        for value in (True, 1, -1, 0.5, "0", "false", [0], {"k": None}):
            assert is_truthy(value) is True
