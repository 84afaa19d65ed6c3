# Custom exceptions for arkmod

class ArkmodError(Exception):
    """Base exception for all application-specific errors."""
    pass

class ParserError(ArkmodError):
    """Raised when a file cannot be parsed by tree-sitter."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(f"Failed to parse {file_path}: {message}")

class GrammarNotFoundError(ArkmodError):
    """Raised when a required tree-sitter grammar is not installed."""
    def __init__(self, language: str, install_command: str):
        self.language = language
        self.install_command = install_command
        super().__init__(f"Grammar for '{language}' not found. Install it with: {install_command}")

class ConfigError(ArkmodError):
    """Raised for configuration-related problems."""
    pass


class EditOverlapError(ArkmodError):
    """Raised when two edits scheduled for the same pass overlap."""

    def __init__(self, first, second):
        self.first = first
        self.second = second
        super().__init__(
            f"Edit [{second.start}, {second.end}) overlaps edit [{first.start}, {first.end})"
        )


class InstallError(ArkmodError):
    """Raised when a package manager command fails."""

    def __init__(self, package_dir: str, command: list, returncode: int):
        self.package_dir = package_dir
        self.command = command
        self.returncode = returncode
        super().__init__(
            f"'{' '.join(command)}' failed in {package_dir} with exit code {returncode}"
        )
