import re

import pytest

from slimbot import log as logmod
from slimbot.log import LoggerAlreadyInitialized, LogLevel


@pytest.fixture(autouse=True)
def _clean_logger():
    logmod.reset()
    yield
    logmod.reset()


def test_log_level_from_int_all_valid():
    assert LogLevel.from_int(0) == LogLevel.DEBUG
    assert LogLevel.from_int(1) == LogLevel.INFO
    assert LogLevel.from_int(2) == LogLevel.WARNING
    assert LogLevel.from_int(3) == LogLevel.ERROR
    assert LogLevel.from_int(4) == LogLevel.FATAL


def test_log_level_from_int_invalid():
    assert LogLevel.from_int(5) is None
    assert LogLevel.from_int(255) is None


def test_log_level_ordering():
    debug, info, warning, error, fatal = (LogLevel.from_int(i) for i in range(5))
    assert debug < info
    assert info < warning
    assert warning < error
    assert error < fatal
    assert debug < fatal


def test_log_level_as_char():
    assert LogLevel.DEBUG.as_char() == "D"
    assert LogLevel.INFO.as_char() == "I"
    assert LogLevel.WARNING.as_char() == "W"
    assert LogLevel.ERROR.as_char() == "E"
    assert LogLevel.FATAL.as_char() == "F"


def test_log_level_colored_tags():
    assert LogLevel.DEBUG.colored_tag() == "D"
    assert LogLevel.INFO.colored_tag() == "\x1b[32mI\x1b[0m"
    assert LogLevel.WARNING.colored_tag() == "\x1b[33mW\x1b[0m"
    assert LogLevel.ERROR.colored_tag() == "\x1b[31mE\x1b[0m"
    assert LogLevel.FATAL.colored_tag() == "\x1b[93mF\x1b[0m"


def test_init_raises_on_double_init():
    logmod.init(LogLevel.DEBUG, None)
    with pytest.raises(LoggerAlreadyInitialized, match="called more than once"):
        logmod.init(LogLevel.DEBUG, None)


def test_should_log_false_before_init():
    assert logmod.should_log(LogLevel.FATAL) is False


def test_should_log_threshold():
    logmod.init(LogLevel.WARNING)
    assert logmod.should_log(LogLevel.INFO) is False
    assert logmod.should_log(LogLevel.WARNING) is True
    assert logmod.should_log(LogLevel.ERROR) is True


def test_log_without_init_raises():
    with pytest.raises(RuntimeError, match="not initialized"):
        logmod.log(LogLevel.INFO, "nothing")


def test_log_file_output(tmp_path):
    log_path = tmp_path / "test.log"
    logmod.init(LogLevel.DEBUG, log_path)
    logmod.log(LogLevel.INFO, "test message")
    content = log_path.read_text(encoding="utf-8")
    assert "test message" in content
    assert "[I]" in content


def test_log_file_line_format(tmp_path):
    log_path = tmp_path / "test.log"
    logmod.init(LogLevel.DEBUG, log_path)
    logmod.debug("first")
    logmod.error("second")
    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    pattern = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[[DIWEF]\] .+$")
    assert all(pattern.match(line) for line in lines)
    assert lines[0].endswith("[D] first")
    assert lines[1].endswith("[E] second")


def test_level_filtering(tmp_path):
    log_path = tmp_path / "test.log"
    logmod.init(LogLevel.WARNING, log_path)
    logmod.debug("hidden debug")
    logmod.info("hidden info")
    logmod.warning("shown warning")
    content = log_path.read_text(encoding="utf-8")
    assert "[D]" not in content
    assert "[I]" not in content
    assert "shown warning" in content


def test_terminal_output_uses_colored_tag(capsys):
    logmod.init(LogLevel.DEBUG)
    logmod.info("to terminal")
    err = capsys.readouterr().err
    assert "[\x1b[32mI\x1b[0m] to terminal" in err


def test_level_helpers_silent_before_init(capsys):
    logmod.info("nobody listens")
    assert capsys.readouterr().err == ""


def test_fatal_logs_and_exits(tmp_path):
    log_path = tmp_path / "test.log"
    logmod.init(LogLevel.ERROR, log_path)
    with pytest.raises(SystemExit) as exc_info:
        logmod.fatal("boom")
    assert exc_info.value.code == 1
    assert "[F] boom" in log_path.read_text(encoding="utf-8")