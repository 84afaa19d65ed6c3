import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)
LOG_FILE_NAME = "arkmod.log"

_logging_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(
    level: str = "INFO",
    suppress_console: Optional[bool] = None,
    enable_file_logging: Optional[bool] = None,
    force: bool = False,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure the shared loguru logger.

    Codemod runs print their own report, so log lines go to stderr and stay
    out of the JSON on stdout. Machine mode (ARKMOD_MACHINE_MODE) silences
    the console sink; ARKMOD_FILE_LOGGING opts into a rotating log file.

    Args:
        level: Minimum level for both sinks
        suppress_console: Drop the stderr sink. None reads ARKMOD_MACHINE_MODE.
        enable_file_logging: Add the file sink. None reads ARKMOD_FILE_LOGGING.
        force: Reconfigure even if logging was already set up
        log_dir: Directory for the log file (defaults to .arkmod/logs)
    """
    global _logging_configured

    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if suppress_console is None:
        suppress_console = _env_flag("ARKMOD_MACHINE_MODE")
    if not suppress_console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if enable_file_logging is None:
        enable_file_logging = _env_flag("ARKMOD_FILE_LOGGING")
    if enable_file_logging:
        if log_dir is None:
            from arkmod.paths import get_paths
            paths = get_paths()
            paths.ensure_dirs()
            log_dir = paths.logs_dir
        else:
            log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / LOG_FILE_NAME,
            level=level,
            rotation="5 MB",
            retention=3,
            compression="gz",
            catch=True,
        )


# Configured on import; the CLI reconfigures for --verbose
setup_logging()
