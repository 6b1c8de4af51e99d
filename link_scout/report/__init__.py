# File: link_scout/report/__init__.py
"""link_scout.report: вывод в консоль, текстовый список эндпоинтов, JSON и HTML отчёты."""

from .console import ConsoleReporter, OutputStyle
from .html_report import render_html
from .json_report import render_json
from .text_report import prepare_output, write_endpoints

__all__ = [
    "ConsoleReporter",
    "OutputStyle",
    "prepare_output",
    "write_endpoints",
    "render_json",
    "render_html",
]
