# link_scout/report/text_report.py
"""
Plain-text endpoint list: one endpoint per line, nothing else.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

from link_scout.errors import OutputFileError


def prepare_output(path: Union[str, Path]) -> Path:
    """
    Create (or truncate) the output file before the scan starts.

    A path that cannot be written is reported now, not after minutes of fetching.
    """
    output = Path(path)
    try:
        with output.open("w", encoding="utf-8"):
            pass
    except OSError as exc:
        raise OutputFileError(str(path), exc) from exc
    return output


def write_endpoints(endpoints: Iterable[str], path: Union[str, Path]) -> Path:
    """Write *endpoints* in the given order, one per line."""
    output = Path(path)
    try:
        with output.open("w", encoding="utf-8") as fh:
            for endpoint in endpoints:
                fh.write(f"{endpoint}\n")
    except OSError as exc:
        raise OutputFileError(str(path), exc) from exc
    return output
