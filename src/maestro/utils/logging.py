"""Logging bootstrap for the ``maestro`` command.

Diagnostics go to a rotating file under ``~/.maestro/logs`` and, from
WARNING up, to stderr. stdout is reserved for generated output, so no
handler ever writes there. Debug mode lowers both thresholds to DEBUG.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path

__all__ = ["setup_logging", "get_log_path"]

_DEFAULT_LOG_DIR = Path.home() / ".maestro" / "logs"
_LOG_FILE_NAME = "maestro.log"
_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_STDERR_FORMAT = "maestro: %(levelname)s: %(message)s"
_ROTATE_BYTES = 1_000_000
_ROTATE_BACKUPS = 3
# request/response bodies are logged at DEBUG by these
_CHATTY_LIBRARIES: tuple[str, ...] = ("asyncio", "httpx", "httpcore", "openai")

_log_path: Path | None = None


def setup_logging(
    debug: bool = False,
    *,
    log_dir: Path | str | None = None,
    stderr: bool = True,
    force: bool = False,
) -> Path:
    """Install the file and stderr handlers on the root logger.

    Calling again is a no-op unless ``force`` is set, which lets the CLI
    switch to debug once the persisted settings are known.

    Returns:
        Path of the active log file.
    """

    global _log_path
    if _log_path is not None and not force:
        return _log_path

    directory = Path(log_dir or os.environ.get("MAESTRO_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / _LOG_FILE_NAME

    file_handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_BACKUPS, encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handlers: list[logging.Handler] = [file_handler]

    if stderr:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
        stderr_handler.setFormatter(logging.Formatter(_STDERR_FORMAT))
        handlers.append(stderr_handler)

    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, handlers=handlers, force=True)
    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    _log_path = path
    return path


def get_log_path() -> Path | None:
    """Return the file written by the last :func:`setup_logging`, if any."""

    return _log_path
