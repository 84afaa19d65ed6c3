"""
Configuration for the RegExp -> arkregex transformation.

Contains the validated settings model, the fixed diagnostic comment and the
node-kind tables shared by the transform components.
"""

import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator

from arkmod.exceptions import ConfigError
from arkmod.user_config import UserConfig

TOOL_NAME = "regexp-to-arkregex"

DIAGNOSTIC_MARKER = f"{TOOL_NAME}:"
DIAGNOSTIC_COMMENT = (
    f"// {DIAGNOSTIC_MARKER} pattern/flags are not statically known, so regex types "
    "may be less precise. Consider an explicit type annotation at this call."
)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class CodemodSettings(BaseModel):
    """
    Validated settings consumed by the transformation core.
    """
    constructor_name: str = "RegExp"
    function_name: str = "regex"
    module_name: str = "arkregex"
    alternate_name: str = "arkRegex"
    call_form: bool = False
    package_name: str = "arkregex"
    package_version: str = "0.0.5"
    max_scan_depth: int = 5

    @field_validator("constructor_name", "function_name", "alternate_name")
    @classmethod
    def _must_be_identifier(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            raise ValueError(f"'{value}' is not a valid identifier")
        return value

    @field_validator("max_scan_depth")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_scan_depth must be >= 0")
        return value


def get_settings(project_root: Optional[Path] = None, **overrides) -> CodemodSettings:
    """
    Build settings from the hierarchical user config.

    Raises:
        ConfigError: If the merged configuration is invalid.
    """
    config = UserConfig(project_root)
    values = {}
    values.update(config.section("codemod"))
    values.update(config.section("dependency"))
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return CodemodSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid arkmod configuration: {e}") from e


# Scope-introducing nodes where function-level `var` hoisting stops
FUNCTION_SCOPES = {
    "function_declaration",
    "function_expression",
    "function",
    "generator_function_declaration",
    "generator_function",
    "arrow_function",
    "method_definition",
}

# Expressions that bind tighter than `as` and never need wrapping
PRIMARY_EXPRESSIONS = {
    "identifier",
    "this",
    "string",
    "template_string",
    "number",
    "regex",
    "true",
    "false",
    "null",
    "undefined",
    "array",
    "object",
    "member_expression",
    "subscript_expression",
    "call_expression",
    "new_expression",
    "parenthesized_expression",
    "non_null_expression",
}
