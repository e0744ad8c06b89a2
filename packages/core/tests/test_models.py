"""Tests for the dependency change model."""

import pytest

from depsync_core.models import DependencyChange, describe, has_dependency


class TestParse:
    def test_simple_spec(self):
        change = DependencyChange.parse("npm:left-pad:1.3.0")
        assert change == DependencyChange("npm", "left-pad", "1.3.0")

    def test_maven_coordinates_keep_inner_colon(self):
        change = DependencyChange.parse("mvn:io.fabric8:foo:2.0.0")
        assert change.kind == "mvn"
        assert change.dependency == "io.fabric8:foo"
        assert change.version == "2.0.0"

    def test_surrounding_whitespace_ignored(self):
        assert DependencyChange.parse("  npm:a:1  ") == DependencyChange("npm", "a", "1")

    @pytest.mark.parametrize("text", ["", "npm", "npm:left-pad", ":left-pad:1.0", "npm::1.0", "npm:left-pad:"])
    def test_malformed_change_raises(self, text):
        with pytest.raises(ValueError):
            DependencyChange.parse(text)

    def test_str_is_parseable(self):
        change = DependencyChange("mvn", "io.acme:bar", "9.9.9")
        assert DependencyChange.parse(str(change)) == change


class TestEquality:
    def test_structural_equality_and_hash(self):
        a = DependencyChange("npm", "left-pad", "1.3.0")
        b = DependencyChange("npm", "left-pad", "1.3.0")
        assert a == b
        assert len({a, b}) == 1

    def test_version_participates_in_equality(self):
        assert DependencyChange("npm", "left-pad", "1.3.0") != DependencyChange("npm", "left-pad", "1.4.0")

    def test_kind_participates_in_equality(self):
        assert DependencyChange("npm", "x", "1") != DependencyChange("mvn", "x", "1")

    def test_immutable(self):
        change = DependencyChange("npm", "left-pad", "1.3.0")
        with pytest.raises(Exception):
            change.version = "2.0.0"

    def test_has_dependency(self):
        changes = [DependencyChange("npm", "a", "1")]
        assert has_dependency(changes, DependencyChange("npm", "a", "1"))
        assert not has_dependency(changes, DependencyChange("npm", "a", "2"))


def test_describe_lists_changes():
    changes = [DependencyChange("npm", "a", "1"), DependencyChange("mvn", "b", "2")]
    assert describe(changes) == "[npm:a:1, mvn:b:2]"


def test_describe_empty():
    assert describe([]) == "[]"
