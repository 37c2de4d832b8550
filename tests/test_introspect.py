"""Tests for JSON path extraction and selector building."""

import pytest

from jqplay.introspect import JsonPathCache, extend_selector, extract_json_paths


class TestExtendSelector:
    """Tests for extend_selector."""

    @pytest.mark.parametrize("selector,step,expected", [
        (".", "users", ".users"),
        (".users", 0, ".users[0]"),
        (".users[0]", "name", ".users[0].name"),
        (".", 1, ".[1]"),
        (".[1]", "id", ".[1].id"),
        (".", "first name", '.["first name"]'),
        (".a", "first-name", '.a["first-name"]'),
    ])
    def test_selectors(self, selector, step, expected):
        assert extend_selector(selector, step) == expected


class TestKeysThatLookLikeSyntax:
    """Keys containing dots, brackets or digits keep their boundaries."""

    def test_selectors_use_real_keys(self):
        data = {"a.b": 1, "0": 2, "x[1]": 3, "outer": {"in.ner": [4]}}
        selectors = {p.path: p.selector for p in extract_json_paths(data)}

        assert selectors[".a.b"] == '.["a.b"]'
        assert selectors[".0"] == '.["0"]'
        assert selectors[".x[1]"] == '.["x[1]"]'
        assert selectors[".outer.in.ner"] == '.outer["in.ner"]'
        assert selectors[".outer.in.ner[0]"] == '.outer["in.ner"][0]'


class TestExtractJsonPaths:
    """Tests for extract_json_paths."""

    def test_object_with_array(self):
        data = {"users": [{"name": "Ada"}], "count": 1}
        paths = {p.path: p for p in extract_json_paths(data)}

        assert list(paths) == [".users", ".users[0]", ".users[0].name", ".count"]
        assert paths[".users"].kind == "array"
        assert paths[".users[0]"].kind == "object"
        assert paths[".users[0].name"].kind == "primitive"
        assert paths[".users[0].name"].sample_value == "Ada"
        assert paths[".count"].selector == ".count"

    def test_root_array(self):
        paths = [p.path for p in extract_json_paths([{"id": 1}, 2])]
        assert paths == [".", ".[0]", ".[0].id", ".[1]"]

    def test_array_sample_is_bounded(self):
        paths = [p.path for p in extract_json_paths(list(range(10)))]
        assert paths == [".", ".[0]", ".[1]", ".[2]"]

    def test_depth_limit(self):
        data = {"a": {"b": {"c": 1}}}
        shallow = [p.path for p in extract_json_paths(data, max_depth=2)]
        deep = [p.path for p in extract_json_paths(data, max_depth=3)]

        assert shallow == [".a"]
        assert deep == [".a", ".a.b", ".a.b.c"]

    @pytest.mark.parametrize("data", [None, 1, "text", True])
    def test_scalars_yield_nothing(self, data):
        assert extract_json_paths(data) == []


class TestJsonPathCache:
    """Tests for JsonPathCache."""

    def test_recomputes_on_change(self):
        cache = JsonPathCache()

        assert [p.path for p in cache.paths_for('{"a": 1}')] == [".a"]
        assert [p.path for p in cache.paths_for('{"b": 1}')] == [".b"]

    def test_invalid_json_yields_no_paths(self):
        assert JsonPathCache().paths_for("{not json") == []

    def test_invalidate(self):
        cache = JsonPathCache()
        cache.paths_for('{"a": 1}')
        cache.invalidate()

        assert [p.path for p in cache.paths_for('{"a": 1}')] == [".a"]

    def test_returns_copy(self):
        cache = JsonPathCache()
        cache.paths_for('{"a": 1}').clear()

        assert len(cache.paths_for('{"a": 1}')) == 1
