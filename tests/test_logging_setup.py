# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from tickoff.logging_setup import setup_logging


def test_file_only_logging(root_logger: logging.Logger, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "tickoff.log"
    setup_logging(console=False, log_file=log_file)

    assert [type(h) for h in root_logger.handlers] == [logging.FileHandler]

    logging.getLogger("tickoff.store").debug("hello %s", "file")
    for h in root_logger.handlers:
        h.flush()
    assert "tickoff.store: hello file" in log_file.read_text(encoding="utf-8")


def test_no_outputs_installs_null_handler(root_logger: logging.Logger) -> None:
    setup_logging(console=False)
    assert [type(h) for h in root_logger.handlers] == [logging.NullHandler]


def test_console_filters_third_party_noise(root_logger: logging.Logger) -> None:
    setup_logging(console_level=logging.INFO)
    (handler,) = root_logger.handlers

    ours = logging.LogRecord("tickoff.cli", logging.INFO, __file__, 1, "msg", None, None)
    theirs = logging.LogRecord("textual", logging.WARNING, __file__, 1, "msg", None, None)
    bad = logging.LogRecord("asyncio", logging.ERROR, __file__, 1, "msg", None, None)

    assert handler.filter(ours)
    assert not handler.filter(theirs)
    assert handler.filter(bad)
