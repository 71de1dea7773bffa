import io
import logging

from expense_tracker.logging_setup import configure_logging, get_logger, reset_logging


def test_stream_handler_receives_package_logs():
    stream = io.StringIO()
    configure_logging("DEBUG", stream=stream, fmt="%(name)s:%(levelname)s:%(message)s")
    get_logger("expense_tracker.store").debug("hello %s", "there")
    assert stream.getvalue() == "expense_tracker.store:DEBUG:hello there\n"


def test_configure_is_idempotent():
    first = io.StringIO()
    second = io.StringIO()
    configure_logging("INFO", stream=first)
    configure_logging("INFO", stream=second)
    get_logger("expense_tracker.cli").info("once")
    assert "once" in first.getvalue()
    assert second.getvalue() == ""
    assert len(logging.getLogger("expense_tracker").handlers) == 1


def test_level_name_is_case_insensitive():
    stream = io.StringIO()
    configure_logging("warning", stream=stream)
    log = get_logger("expense_tracker.session")
    log.info("quiet")
    log.warning("loud")
    assert "quiet" not in stream.getvalue()
    assert "loud" in stream.getvalue()


def test_log_file_handler(tmp_path):
    target = tmp_path / "app.log"
    configure_logging("INFO", log_file=target)
    get_logger("expense_tracker.term_ui").info("to file")
    reset_logging()
    assert "to file" in target.read_text(encoding="utf-8")


def test_unconfigured_package_logger_is_silent():
    get_logger("expense_tracker.models")
    pkg = logging.getLogger("expense_tracker")
    assert any(isinstance(h, logging.NullHandler) for h in pkg.handlers)
