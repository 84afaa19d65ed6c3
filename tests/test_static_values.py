"""Unit tests for the static-value classifier."""

import pytest

from arkmod.transform import ExprKind, ScopeResolver, is_static, view
from helpers import first_argument, parse

pytestmark = pytest.mark.fast


def classify(source: str) -> bool:
    unit = parse(source)
    return is_static(first_argument(unit), ScopeResolver(unit))


class TestExprView:
    def test_string_kind(self):
        unit = parse('new RegExp("a");')
        assert view(first_argument(unit)).kind == ExprKind.STRING

    def test_template_counts_substitutions(self):
        unit = parse('new RegExp(`a${b}c${d}`);')
        expr = view(first_argument(unit))
        assert expr.kind == ExprKind.TEMPLATE
        assert expr.substitutions == 2

    def test_only_plus_is_binary_plus(self):
        unit = parse('new RegExp("a" - "b");')
        assert view(first_argument(unit)).kind == ExprKind.OTHER

    def test_none_is_other(self):
        assert view(None).kind == ExprKind.OTHER


class TestIsStatic:
    @pytest.mark.parametrize("expression", [
        '"a"',
        "'a'",
        '`plain`',
        '("a")',
        '"a" + "b"',
        '("a" + `b`) + "c"',
    ])
    def test_literal_forms_are_static(self, expression):
        assert classify(f'new RegExp({expression});')

    @pytest.mark.parametrize("expression", [
        '`a${b}`',
        'input',
        'getPattern()',
        'config.pattern',
        'flag ? "a" : "b"',
        '"a" + input',
        '/abc/',
    ])
    def test_runtime_forms_are_dynamic(self, expression):
        assert not classify(f'new RegExp({expression});')

    def test_const_with_static_initializer(self):
        assert classify('const p = "a";\nnew RegExp(p);')

    def test_const_chain(self):
        assert classify('const a = "x";\nconst b = a + "y";\nnew RegExp(b);')

    def test_let_is_dynamic(self):
        assert not classify('let p = "a";\nnew RegExp(p);')

    def test_const_with_dynamic_initializer(self):
        assert not classify('const p = "a" + input;\nnew RegExp(p);')

    def test_parameter_is_dynamic(self):
        assert not classify('function f(p: string) {\n  return new RegExp(p);\n}')

    def test_imported_constant_is_dynamic(self):
        assert not classify('import { p } from "./patterns";\nnew RegExp(p);')

    def test_self_reference_terminates(self):
        assert not classify('const a = a + "x";\nnew RegExp(a);')

    def test_mutual_reference_terminates(self):
        assert not classify('const a = b + "x";\nconst b = a + "y";\nnew RegExp(a);')
