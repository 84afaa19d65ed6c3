"""Unit tests for the replacement-text builder."""

import pytest

from arkmod.schemas import ImportPlan
from arkmod.transform import CodemodSettings, ReplacementBuilder, ScopeResolver, SiteLocator
from helpers import parse

pytestmark = pytest.mark.fast


def build(source: str, binding: str = "regex", path: str = "test.ts") -> str:
    settings = CodemodSettings()
    unit = parse(source, path)
    locator = SiteLocator(unit, ScopeResolver(unit), settings)
    sites, _ = locator.discover()
    plan = ImportPlan(required=True, binding_name=binding)
    builder = ReplacementBuilder(unit, plan, settings)
    return builder.build(sites[0], locator.classify(sites[0]))


class TestReplacementBuilder:
    def test_static_pattern(self):
        assert build('new RegExp("\\\\d+");') == 'regex("\\\\d+") as RegExp'

    def test_static_pattern_and_flags(self):
        assert build('new RegExp("^[a-z]+$", "i");') == 'regex("^[a-z]+$", "i") as RegExp'

    def test_dynamic_pattern_is_coerced(self):
        assert build('new RegExp(userInput);') == (
            'regex(userInput as Parameters<typeof regex>[0]) as RegExp'
        )

    def test_dynamic_flags_use_second_parameter(self):
        assert build('new RegExp("a", flags);') == (
            'regex("a", flags as Parameters<typeof regex>[1]) as RegExp'
        )

    def test_low_precedence_argument_is_wrapped(self):
        assert build('new RegExp(c ? "a" : "b");') == (
            'regex((c ? "a" : "b") as Parameters<typeof regex>[0]) as RegExp'
        )

    def test_binding_name_is_used_everywhere(self):
        assert build('new RegExp(p);', binding="arkRegex") == (
            'arkRegex(p as Parameters<typeof arkRegex>[0]) as RegExp'
        )

    def test_member_receiver_is_parenthesized(self):
        assert build('new RegExp("x").test(y);') == '(regex("x") as RegExp)'

    def test_javascript_has_no_type_coercions(self):
        assert build('new RegExp(p, "g").test(y);', path="test.js") == 'regex(p, "g")'

    def test_edit_spans_the_site(self):
        settings = CodemodSettings()
        source = 'const r = new RegExp("a");'
        unit = parse(source)
        locator = SiteLocator(unit, ScopeResolver(unit), settings)
        sites, _ = locator.discover()
        builder = ReplacementBuilder(unit, ImportPlan(required=True, binding_name="regex"), settings)
        edit = builder.edit_for(sites[0], locator.classify(sites[0]))
        assert source[edit.start:edit.end] == 'new RegExp("a")'
