"""Tests for logging configuration."""

import io
import logging

from rich.logging import RichHandler

from wasmbench.logging import configure_logging, level_for


def test_level_for_flags():
    assert level_for(0, False) == logging.INFO
    assert level_for(1, False) == logging.DEBUG
    assert level_for(3, False) == logging.DEBUG
    assert level_for(2, True) == logging.WARNING


def test_default_level_is_info():
    configure_logging(stream=io.StringIO())
    assert logging.getLogger().level == logging.INFO


def test_verbose_enables_debug():
    configure_logging(verbosity=1, stream=io.StringIO())
    assert logging.getLogger().level == logging.DEBUG


def test_quiet_hides_progress_but_keeps_failures():
    stream = io.StringIO()
    configure_logging(verbosity=2, quiet=True, no_color=True, stream=stream)
    log = logging.getLogger("wasmbench.core.driver")
    log.info("Iteration 1")
    log.error("Command failed on iteration 1 (exit code 3)")
    assert "Iteration 1" not in stream.getvalue()
    assert "Command failed on iteration 1" in stream.getvalue()


def test_logs_go_to_stream():
    stream = io.StringIO()
    console = configure_logging(no_color=True, stream=stream)
    assert console.file is stream
    assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)
    logging.getLogger("wasmbench.test").info("iteration started")
    assert "iteration started" in stream.getvalue()
