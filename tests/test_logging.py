import logging

import pytest

from webworm_api.app.core.logging_config import API_FORMAT, CLI_FORMAT, HANDLER_NAME, setup_logging


@pytest.fixture
def root_logger():
    """Give each test a root logger without webworm handlers."""
    root = logging.getLogger()
    level = root.level
    saved = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
    for handler in saved:
        root.removeHandler(handler)
    yield root
    for handler in webworm_handlers(root):
        root.removeHandler(handler)
        handler.close()
    for handler in saved:
        root.addHandler(handler)
    root.setLevel(level)


def webworm_handlers(root):
    return [h for h in root.handlers if h.get_name() == HANDLER_NAME]


def make_record(message: str) -> logging.LogRecord:
    return logging.LogRecord("webworm_api.cli", logging.INFO, __file__, 1, message, None, None)


def test_cli_format_is_message_only(root_logger):
    setup_logging("DEBUG", fmt=CLI_FORMAT)

    (console,) = webworm_handlers(root_logger)
    assert root_logger.level == logging.DEBUG
    assert console.format(make_record("setup logging")) == "[INFO] setup logging"
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_second_call_keeps_first_setup(root_logger):
    setup_logging("WARNING", fmt=CLI_FORMAT)
    setup_logging("DEBUG")

    assert len(webworm_handlers(root_logger)) == 1
    assert root_logger.level == logging.WARNING


def test_log_file_uses_timestamped_format(root_logger, tmp_path):
    logfile = tmp_path / "logs" / "webworm.log"

    setup_logging("info", str(logfile), fmt=CLI_FORMAT)
    logging.getLogger("webworm_api.test").info("bookmark created")

    console, file_handler = webworm_handlers(root_logger)
    file_handler.flush()
    line = logfile.read_text(encoding="utf-8").strip()
    assert line.endswith("[INFO] webworm_api.test: bookmark created")
    assert file_handler.formatter._fmt == API_FORMAT


def test_unknown_level_means_info(root_logger):
    setup_logging("chatty")

    assert root_logger.level == logging.INFO
