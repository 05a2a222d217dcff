from pathlib import Path

import pytest
import structlog

from quote_keeper.logging_conf import LOGGER_NAME, build_logging_config, structlog_processors


def test_logging_config_writes_run_and_error_logs(tmp_path: Path) -> None:
    config = build_logging_config(tmp_path)
    handlers = config["handlers"]

    assert handlers["run_log"]["filename"] == str(tmp_path / "quote_keeper.log")
    assert handlers["error_log"]["filename"] == str(tmp_path / "error.log")
    assert handlers["error_log"]["level"] == "ERROR"
    assert {handler["formatter"] for handler in handlers.values()} == {"json"}
    assert config["formatters"]["json"]["()"] == "pythonjsonlogger.jsonlogger.JsonFormatter"
    assert config["loggers"][LOGGER_NAME]["handlers"] == ["console", "run_log", "error_log"]


@pytest.mark.parametrize(("verbose", "level"), [(False, "INFO"), (True, "DEBUG")])
def test_logging_config_level_follows_verbose(tmp_path: Path, verbose: bool, level: str) -> None:
    config = build_logging_config(tmp_path, verbose=verbose)

    assert config["loggers"][LOGGER_NAME]["level"] == level
    assert config["handlers"]["console"]["level"] == level
    assert config["handlers"]["run_log"]["level"] == "INFO"


def test_structlog_processors_hand_off_to_stdlib() -> None:
    processors = structlog_processors()

    assert processors[0] is structlog.contextvars.merge_contextvars
    assert processors[-1] is structlog.stdlib.ProcessorFormatter.wrap_for_formatter
