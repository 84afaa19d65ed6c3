"""
Transform facade: one file in, rewritten text (or None) out.

    Discover -> Classify -> (reject | accept)* -> Plan Import
    -> Commit Edits -> Insert Import -> Return

Pure function of (text, path); no state survives between calls.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from arkmod.exceptions import ArkmodError
from arkmod.logging_config import logger
from arkmod.parser import SourceUnit, parse_source
from arkmod.schemas import Classification, EditOp, FileReport
from .annotator import CommentAnnotator
from .builder import ReplacementBuilder
from .config import CodemodSettings
from .editor import EditCommitter, apply_edits
from .import_manager import ImportManager
from .locator import CandidateSite, SiteLocator
from .resolver import ScopeResolver

MANIFEST_NAME = "package.json"

SiteKey = Tuple[int, int]


@dataclass
class TransformOutcome:
    new_text: Optional[str]
    report: FileReport

    @property
    def changed(self) -> bool:
        return self.new_text is not None


def _key(site: CandidateSite) -> SiteKey:
    return (site.start_byte, site.end_byte)


def _nest(sites: List[CandidateSite]) -> Tuple[List[CandidateSite], Dict[SiteKey, List[CandidateSite]]]:
    """Split sites (sorted by start, longest first) into outermost sites and direct children."""
    outermost: List[CandidateSite] = []
    children: Dict[SiteKey, List[CandidateSite]] = {_key(s): [] for s in sites}
    stack: List[CandidateSite] = []
    for site in sites:
        while stack and not stack[-1].contains(site):
            stack.pop()
        if stack:
            children[_key(stack[-1])].append(site)
        else:
            outermost.append(site)
        stack.append(site)
    return outermost, children


class TransformRun:
    """
    State for one transformation call; discarded afterwards.
    """

    def __init__(self, unit: SourceUnit, settings: CodemodSettings):
        self.unit = unit
        self.settings = settings
        self.resolver = ScopeResolver(unit)
        self.locator = SiteLocator(unit, self.resolver, settings)
        self.imports = ImportManager(unit, self.resolver, settings)
        self._texts: Dict[SiteKey, str] = {}
        self._classes: Dict[SiteKey, Classification] = {}
        self._children: Dict[SiteKey, List[CandidateSite]] = {}
        self.builder: Optional[ReplacementBuilder] = None

    def _render(self, node, within: List[CandidateSite]) -> str:
        nested = [
            EditOp(start=c.start_byte, end=c.end_byte, text=self._text(c))
            for c in within
            if node.start_byte <= c.start_byte and c.end_byte <= node.end_byte
        ]
        if not nested:
            return self.unit.node_text(node)
        return apply_edits(self.unit.data, nested, node.start_byte, node.end_byte).decode('utf-8')

    def _text(self, site: CandidateSite) -> str:
        key = _key(site)
        if key not in self._texts:
            children = self._children.get(key, [])
            self._texts[key] = self.builder.build(
                site, self._classes[key], lambda node: self._render(node, children)
            )
        return self._texts[key]

    def _first_dynamic(self, site: CandidateSite) -> Optional[Classification]:
        """Classification of the first site in this nest with a dynamic argument."""
        key = _key(site)
        if not self._classes[key].is_static:
            return self._classes[key]
        for child in self._children.get(key, []):
            found = self._first_dynamic(child)
            if found is not None:
                return found
        return None

    @staticmethod
    def _annotation_offset(site: CandidateSite, outermost: List[CandidateSite], annotator: CommentAnnotator) -> int:
        """
        Move the comment up while its line start would land inside another
        replacement, a template literal or JSX markup.
        """
        offset = site.start_byte
        moved = True
        while moved:
            moved = False
            line_start = annotator.line_start(offset)
            for other in outermost:
                if other.start_byte < line_start < other.end_byte:
                    offset = other.start_byte
                    moved = True
                    break
            if moved:
                continue
            container = annotator.non_code_container(line_start)
            if container is not None:
                offset = container.start_byte
                moved = True
        return offset

    def run(self) -> TransformOutcome:
        report = FileReport(path=self.unit.path, changed=False)
        sites, rejected = self.locator.discover()
        report.sites_skipped = rejected
        if not sites:
            return TransformOutcome(None, report)

        plan = self.imports.plan()
        self.builder = ReplacementBuilder(self.unit, plan, self.settings)
        annotator = CommentAnnotator(self.unit)
        committer = EditCommitter()

        for site in sites:
            self._classes[_key(site)] = self.locator.classify(site)
        outermost, self._children = _nest(sites)

        for site in outermost:
            committer.add(EditOp(start=site.start_byte, end=site.end_byte, text=self._text(site)))
            dynamic = self._first_dynamic(site)
            if dynamic is not None:
                offset = self._annotation_offset(site, outermost, annotator)
                comment = annotator.annotate(offset, dynamic)
                if comment is not None:
                    committer.add(comment)
                    report.comments_added += 1

        rewritten = committer.commit(self.unit.data)
        if rewritten is None:
            return TransformOutcome(None, report)

        anchor = self.imports.anchor_for(rewritten, committer.edits)
        rewritten, strategy = self.imports.insert(rewritten, plan, anchor)
        report.changed = True
        report.sites_rewritten = len(sites)
        report.import_added = strategy is not None
        report.insertion_strategy = strategy
        report.binding_name = plan.binding_name
        return TransformOutcome(rewritten, report)


def run_transform(source: str, path: str = "", settings: Optional[CodemodSettings] = None) -> TransformOutcome:
    """
    Rewrite one file's source and report what happened.

    Errors inside the core never escape: the file is reported unchanged.
    """
    settings = settings or CodemodSettings()
    try:
        unit = parse_source(source, path)
        outcome = TransformRun(unit, settings).run()
    except ArkmodError as e:
        logger.warning(f"Leaving {path or '<memory>'} unchanged: {e}")
        return TransformOutcome(None, FileReport(path=path, changed=False, error=str(e)))

    if outcome.changed:
        logger.info(
            f"Rewrote {outcome.report.sites_rewritten} {settings.constructor_name} site(s) in {path or '<memory>'}"
        )
    return outcome


def transform(source: str, path: str = "", settings: Optional[CodemodSettings] = None) -> Optional[str]:
    """
    Returns:
        The rewritten source, or None when the file should be left untouched.
    """
    return run_transform(source, path, settings).new_text


def process_file(source: str, path: str, settings: Optional[CodemodSettings] = None) -> Optional[str]:
    """
    Dispatch on file kind: manifests go to the dependency editor, everything
    else through the source transformation.
    """
    if Path(path).name == MANIFEST_NAME:
        from arkmod.manifest import add_dependency
        return add_dependency(source, path, settings)
    return transform(source, path, settings)
