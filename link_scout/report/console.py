# link_scout/report/console.py
"""
Human-readable and quiet console output.

Colors are decided once at startup (:class:`OutputStyle`) and passed in; nothing
here mutates global state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import click

from link_scout.crawler.models import ScanResult

__all__ = ("OutputStyle", "ConsoleReporter")


@dataclass(frozen=True, slots=True)
class OutputStyle:
    """Immutable color scheme for console output."""

    enabled: bool = True
    error: str = "red"
    success: str = "green"
    info: str = "yellow"
    source: str = "blue"

    @classmethod
    def plain(cls) -> OutputStyle:
        return cls(enabled=False)

    def paint(self, text: str, fg: Optional[str] = None, bold: bool = False) -> str:
        if not self.enabled:
            return text
        return click.style(text, fg=fg, bold=bold)


class ConsoleReporter:
    """Prints progress while the aggregator runs, and the final summary afterwards."""

    def __init__(self, style: OutputStyle, quiet: bool = False) -> None:
        self.style = style
        self.quiet = quiet

    def scan_started(self, total: int, threads: int) -> None:
        if self.quiet:
            return
        click.echo(self.style.paint(f"[*] Scanning {total} URL(s) with {threads} threads...", self.style.info))

    def scan_failed(self, result: ScanResult) -> None:
        if self.quiet:
            return
        click.echo(
            self.style.paint(f"[-] Error scanning {result.source_url}: {result.error}", self.style.error),
            err=True,
        )

    def source_started(self, url: str) -> None:
        if self.quiet:
            return
        click.echo()
        click.echo(self.style.paint(f"[+] Endpoints found in {url}:", self.style.source))

    def endpoint_found(self, endpoint: str) -> None:
        if self.quiet:
            return
        click.echo(f"  {self.style.paint(endpoint, self.style.success)}")

    def saving(self, count: int, path: object) -> None:
        if self.quiet:
            return
        click.echo()
        click.echo(self.style.paint(f"[*] Saving {count} unique endpoints to '{path}'...", self.style.info))

    def report_saved(self, kind: str, path: object) -> None:
        if self.quiet:
            return
        click.echo(self.style.paint(f"[*] {kind} report: {path}", self.style.info))

    def finished(self, endpoints: Iterable[str]) -> None:
        """Quiet mode: the sorted list. Human mode: the total count."""
        endpoints = list(endpoints)
        if self.quiet:
            for endpoint in endpoints:
                click.echo(endpoint)
            return
        click.echo()
        click.echo(
            self.style.paint(
                f"[✔] Done. Found a total of {len(endpoints)} unique endpoints.",
                self.style.info,
                bold=True,
            )
        )
