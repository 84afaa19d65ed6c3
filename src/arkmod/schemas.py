from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class EditOp(BaseModel):
    """
    A single text edit over a byte buffer.

    `start == end` denotes a pure insertion at that point (zero-width,
    exclusive); otherwise the half-open range [start, end) is replaced.
    """
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    text: str

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: "EditOp") -> bool:
        """True if the two edits cannot both be applied in one pass."""
        first, second = sorted((self, other), key=lambda e: (e.start, e.end))
        if first.is_insertion and second.is_insertion:
            return first.start == second.start
        return second.start < first.end


class Classification(BaseModel):
    """
    Per-site classification result.
    """
    identifier_is_global: bool
    pattern_is_static: bool
    flags_is_static: bool = True  # No second argument counts as static

    @property
    def is_static(self) -> bool:
        return self.pattern_is_static and self.flags_is_static


class ImportPlan(BaseModel):
    """
    How the replacement function is referenced in one file.
    """
    required: bool
    binding_name: str
    alias_of: Optional[str] = None  # Exported name when binding_name is an alias
    existing_local_name: Optional[str] = None


class InsertionStrategy(str, Enum):
    """Ordered fallbacks for placing the import line."""
    EXACT_ANCHOR = "exact_anchor"
    KEYWORD_LINE = "keyword_line"
    END_OF_FILE = "end_of_file"
    START_OF_FILE = "start_of_file"


class FileReport(BaseModel):
    """
    Result of processing one file, used by the CLI for output.
    """
    path: str
    changed: bool
    sites_rewritten: int = 0
    sites_skipped: int = 0
    comments_added: int = 0
    import_added: bool = False
    binding_name: Optional[str] = None
    insertion_strategy: Optional[InsertionStrategy] = None
    error: Optional[str] = None


class InstallResult(BaseModel):
    """
    Outcome of the installer for one package directory.
    """
    package_dir: str
    action: Literal["installed", "skipped", "planned", "failed"]
    reason: str = ""
    package_manager: Optional[str] = None
    command: List[str] = Field(default_factory=list)
