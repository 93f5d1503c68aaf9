from __future__ import annotations

import logging

from report_mailer.log import SUCCESS, TerminalFormatter


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("report_mailer", level, __file__, 1, msg, None, None)


def test_formatter_prefixes_time_without_color():
    line = TerminalFormatter(use_color=False).format(_record(logging.INFO, "hello"))
    assert line.startswith("[")
    assert line.endswith("] hello")
    assert len(line.split("]")[0]) == len("[HH:MM:SS")


def test_formatter_colors_by_level():
    formatter = TerminalFormatter(use_color=True)
    assert formatter.format(_record(logging.ERROR, "bad")).startswith("\033[31m")
    assert formatter.format(_record(SUCCESS, "ok")).startswith("\033[32m")
    assert formatter.format(_record(logging.WARNING, "hm")).endswith("\033[0m")


def test_success_level_name():
    assert logging.getLevelName(SUCCESS) == "SUCCESS"
