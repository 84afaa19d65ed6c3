"""Unit tests for call-site discovery and filtering."""

import pytest

from arkmod.transform import CodemodSettings, ScopeResolver, SiteKind, SiteLocator
from arkmod.transform.locator import needs_parens
from helpers import find_nodes, parse

pytestmark = pytest.mark.fast


def discover(source: str, settings: CodemodSettings = None, path: str = "test.ts"):
    unit = parse(source, path)
    locator = SiteLocator(unit, ScopeResolver(unit), settings or CodemodSettings())
    return locator, locator.discover()


class TestDiscovery:
    def test_accepts_one_and_two_arguments(self):
        _, (sites, rejected) = discover('new RegExp("a");\nnew RegExp("a", "g");\n')
        assert [len(s.arguments) for s in sites] == [1, 2]
        assert rejected == 0

    def test_rejects_zero_and_three_arguments(self):
        _, (sites, rejected) = discover('new RegExp();\nnew RegExp;\nnew RegExp(a, b, c);\n')
        assert sites == []
        assert rejected == 3

    def test_rejects_spread_argument(self):
        _, (sites, rejected) = discover('new RegExp(...args);\n')
        assert sites == []
        assert rejected == 1

    def test_comments_are_not_arguments(self):
        _, (sites, _) = discover('new RegExp("a" /* pattern */, /* flags */ "g");\n')
        assert len(sites[0].arguments) == 2
        assert all(arg.type == "string" for arg in sites[0].arguments)

    def test_rejects_shadowed_constructor(self):
        _, (sites, rejected) = discover('function f(RegExp: any) {\n  return new RegExp("a");\n}\n')
        assert sites == []
        assert rejected == 1

    def test_other_constructors_are_ignored(self):
        _, (sites, rejected) = discover('new Date("2020");\nnew foo.RegExp("a");\n')
        assert sites == []
        assert rejected == 0

    def test_call_form_disabled_by_default(self):
        _, (sites, _) = discover('const r = RegExp("a");\n')
        assert sites == []

    def test_call_form_when_enabled(self):
        _, (sites, _) = discover('const r = RegExp("a");\n', CodemodSettings(call_form=True))
        assert len(sites) == 1
        assert sites[0].kind == SiteKind.CALL

    def test_sites_sorted_outer_first(self):
        _, (sites, _) = discover('new RegExp(new RegExp("a").source);\n')
        assert len(sites) == 2
        assert sites[0].contains(sites[1])
        assert sites[0].kind == SiteKind.CONSTRUCTOR


class TestClassification:
    def test_static_single_argument(self):
        locator, (sites, _) = discover('new RegExp("a");\n')
        result = locator.classify(sites[0])
        assert result.identifier_is_global
        assert result.pattern_is_static
        assert result.flags_is_static

    def test_absent_flags_count_as_static(self):
        locator, (sites, _) = discover('new RegExp(input);\n')
        result = locator.classify(sites[0])
        assert not result.pattern_is_static
        assert result.flags_is_static

    def test_dynamic_flags(self):
        locator, (sites, _) = discover('new RegExp("a", flags);\n')
        result = locator.classify(sites[0])
        assert result.pattern_is_static
        assert not result.flags_is_static
        assert not result.is_static


class TestNeedsParens:
    @pytest.mark.parametrize("source,expected", [
        ('new RegExp("x").test(y);', True),
        ('new RegExp("x")["test"](y);', True),
        ('"" + new RegExp("x");', True),
        ('typeof new RegExp("x");', True),
        ('const r = new RegExp("x");', False),
        ('f(new RegExp("x"));', False),
        ('const o = { r: new RegExp("x") };', False),
    ])
    def test_parent_context(self, source, expected):
        unit = parse(source)
        node = find_nodes(unit, "new_expression")[0]
        assert needs_parens(node) is expected
