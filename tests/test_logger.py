import logging
import sys

from seqflow.logger import LogFormatter, get_logger


def _record(level):
    return logging.LogRecord("seqflow", level, __file__, 1, "hello %s", ("there",), None)


def test_formatter_colors_known_levels():
    formatter = LogFormatter(color=True, fmt="%(color_on)s%(message)s%(color_off)s")
    line = formatter.format(_record(logging.WARNING))
    assert line.startswith(LogFormatter.COLOR_CODES[logging.WARNING])
    assert line.endswith(LogFormatter.RESET_CODE)
    assert "hello there" in line


def test_formatter_without_color():
    formatter = LogFormatter(color=False, fmt="%(color_on)s%(message)s%(color_off)s")
    assert formatter.format(_record(logging.ERROR)) == "hello there"


def test_get_logger_is_cached_per_name():
    assert get_logger("seqflow-test-cache") is get_logger("seqflow-test-cache")
    assert get_logger(None) is get_logger()


def test_default_configuration(monkeypatch):
    for variable in ("SEQFLOW_LOG_LEVEL", "SEQFLOW_LOG_OUTPUT", "SEQFLOW_LOG_COLOR"):
        monkeypatch.delenv(variable, raising=False)
    logger = get_logger("seqflow-test-defaults").get_logger()
    (handler,) = logger.handlers
    assert handler.level == logging.WARNING
    assert handler.stream is sys.stderr
    assert handler.formatter.color is True
    assert logger.propagate is False


def test_environment_configuration(monkeypatch):
    monkeypatch.setenv("SEQFLOW_LOG_LEVEL", "debug")
    monkeypatch.setenv("SEQFLOW_LOG_OUTPUT", "stdout")
    monkeypatch.setenv("SEQFLOW_LOG_COLOR", "false")
    logger = get_logger("seqflow-test-env").get_logger()
    (handler,) = logger.handlers
    assert handler.level == logging.DEBUG
    assert handler.stream is sys.stdout
    assert handler.formatter.color is False


def test_drain_cap_is_logged_as_warning(monkeypatch):
    from seqflow import from_channel
    from seqflow import streams

    messages = []
    monkeypatch.setattr(streams.logger, "warn", lambda *args: messages.append(args[0] % args[1:]))
    from_channel(iter(range(5)), max_size=2)
    assert messages == ["from_channel stopped at max_size=2 before the source was exhausted"]
