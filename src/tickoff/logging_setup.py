"""Logging configuration for Tickoff."""

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - tickoff logs pass at the configured level
    - third-party libraries (textual, asyncio, ...) only show errors
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "tickoff" or record.name.startswith("tickoff."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    console_level: int | str = logging.WARNING,
    log_file: str | Path | None = None,
    file_level: int = logging.DEBUG,
    console: bool = True,
) -> None:
    """
    Configure the root logger with:
    - Console handler (stderr), filtered; skipped when console=False so
      the full-screen UI is never drawn over
    - Optional file handler with full logs

    Call it before the first log call. Calling it again replaces the
    handlers installed earlier.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(console_level)
        ch.setFormatter(fmt)
        ch.addFilter(_ConsoleNoiseFilter())
        root.addHandler(ch)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    if not root.handlers:
        # Nothing to write to; stop lastResort from printing warnings.
        root.addHandler(logging.NullHandler())

    logging.captureWarnings(True)
