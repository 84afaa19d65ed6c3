import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

import pathspec

from arkmod.logging_config import logger
from .config import DEFAULT_IGNORE_PATTERNS, validate_extensions


def _load_spec(directory: Path, respect_gitignore: bool) -> pathspec.GitIgnoreSpec:
    all_patterns = list(DEFAULT_IGNORE_PATTERNS)
    if respect_gitignore:
        gitignore_path = directory / ".gitignore"
        if gitignore_path.is_file():
            try:
                gitignore_patterns = gitignore_path.read_text(encoding="utf-8").splitlines()
                all_patterns.extend(gitignore_patterns)
                logger.debug(f"Loaded {len(gitignore_patterns)} patterns from '{gitignore_path}'")
            except OSError as e:
                logger.warning(f"Could not read .gitignore file at '{gitignore_path}'. Error: {e}")
    return pathspec.GitIgnoreSpec.from_lines(all_patterns)


def iter_files(
    directory: Path,
    extensions: Optional[List[str]] = None,
    respect_gitignore: bool = True,
    names: Optional[Iterable[str]] = None,
) -> Iterator[Path]:
    """
    Walk a directory and yield files selected for processing.

    Args:
        directory: The root directory to start the scan from.
        extensions: File extensions to include (e.g., ['.ts', '.tsx']). None means all.
        respect_gitignore: If True, files listed in .gitignore are excluded too.
        names: Exact file names to include (e.g., ['package.json']). Combined with extensions by OR.

    Yields:
        Paths of matching files, in sorted walk order.
    """
    if extensions is not None:
        validate_extensions(extensions)
    allowed_extensions = set(extensions) if extensions else None
    allowed_names = set(names) if names else None
    spec = _load_spec(directory, respect_gitignore)

    for root, dirs, files in os.walk(directory):
        root_path = Path(root)

        # Prune ignored directories in place so os.walk never descends into them
        kept = []
        for d in sorted(dirs):
            dir_path_to_check = (root_path / d).relative_to(directory)
            if spec.match_file(f"{dir_path_to_check}/"):
                logger.debug(f"Ignoring directory '{dir_path_to_check}' due to ignore rules.")
            else:
                kept.append(d)
        dirs[:] = kept

        for file_name in sorted(files):
            file_path = root_path / file_name
            relative_path = file_path.relative_to(directory)

            if spec.match_file(str(relative_path)):
                logger.debug(f"Ignoring '{relative_path}' due to ignore rules")
                continue

            selected_by_name = allowed_names is not None and file_name in allowed_names
            selected_by_ext = allowed_extensions is not None and file_path.suffix in allowed_extensions
            if allowed_names is None and allowed_extensions is None:
                selected_by_ext = True
            if not (selected_by_name or selected_by_ext):
                continue

            yield file_path


def collect_targets(paths: Iterable[Path], extensions: List[str], respect_gitignore: bool = True) -> List[Path]:
    """
    Expand CLI path arguments: files are taken as-is, directories are scanned.
    """
    targets: List[Path] = []
    for path in paths:
        if path.is_dir():
            targets.extend(iter_files(path, extensions=extensions, respect_gitignore=respect_gitignore))
        elif path.is_file():
            targets.append(path)
        else:
            logger.warning(f"Skipping '{path}': not a file or directory")
    logger.info(f"Selected {len(targets)} file(s) for processing")
    return targets
