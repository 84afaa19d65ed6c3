"""
Transform package: rewrite `new RegExp(...)` into typed arkregex calls.

Components are usable on their own; drivers should go through the facade.
"""

from .facade import TransformOutcome, process_file, run_transform, transform
from .config import CodemodSettings, DIAGNOSTIC_COMMENT, DIAGNOSTIC_MARKER, get_settings
from .resolver import Binding, BindingKind, IdentifierOrigin, ScopeResolver
from .static_values import ExprKind, ExprView, is_static, view
from .locator import CandidateSite, SiteKind, SiteLocator
from .builder import ReplacementBuilder
from .annotator import CommentAnnotator
from .import_manager import ExistingImport, ImportAnchor, ImportManager
from .editor import EditCommitter, apply_edits, atomic_write, write_back

__all__ = [
    # Main entrypoints
    "transform",
    "run_transform",
    "process_file",
    "TransformOutcome",

    # Components
    "ScopeResolver",
    "SiteLocator",
    "ReplacementBuilder",
    "CommentAnnotator",
    "ImportManager",
    "EditCommitter",

    # Data
    "Binding",
    "BindingKind",
    "IdentifierOrigin",
    "CandidateSite",
    "SiteKind",
    "ExistingImport",
    "ImportAnchor",
    "ExprKind",
    "ExprView",
    "is_static",
    "view",
    "apply_edits",
    "atomic_write",
    "write_back",

    # Configuration
    "CodemodSettings",
    "get_settings",
    "DIAGNOSTIC_COMMENT",
    "DIAGNOSTIC_MARKER",
]
