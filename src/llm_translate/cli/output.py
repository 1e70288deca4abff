"""
Output - Console output formatting.

Provides colored status lines for the CLI and the watch-mode display.
"""

import sys
from datetime import datetime
from pathlib import Path

from llm_translate.application.transform import TransformationResult
from llm_translate.application.watch import FileChange, WatchStats
from llm_translate.core.domain.entities import FileSnapshot


class Colors:
    """
    ANSI color codes for terminal output.

    Attributes:
        RESET: Reset all formatting to default.
        BOLD: Make text bold.
        DIM: Make text dimmed/faded.
        RED: Red text color.
        GREEN: Green text color.
        BLUE: Blue text color.
        CYAN: Cyan text color.
    """

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"


class Symbols:
    """Unicode symbols for terminal output."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    SYNC = "↔"
    DOT = "•"

    BOX_H = "─"


class Console:
    """
    Console output helper with colors and formatting.

    Attributes:
        color: Whether to use ANSI color codes.
        verbose: Whether to print debug messages.
        quiet: Whether to suppress most output.
    """

    def __init__(self, color: bool = True, verbose: bool = False, quiet: bool = False):
        """
        Initialize the console output helper.

        Args:
            color: Enable colored output. Automatically disabled if stdout is not a TTY.
            verbose: Enable verbose debug output.
            quiet: Suppress most output, only show errors.
        """
        self.color = color and sys.stdout.isatty()
        self.verbose = verbose and not quiet
        self.quiet = quiet

    def _c(self, text: str, *codes: str) -> str:
        """Apply color codes to text, or return it unchanged if color is off."""
        if not self.color:
            return text
        return "".join(codes) + text + Colors.RESET

    def print(self, text: str = "", force: bool = False) -> None:
        """
        Print text to stdout.

        Args:
            text: Text to print. Defaults to empty string for blank line.
            force: Print even in quiet mode.
        """
        if self.quiet and not force:
            return
        print(text, flush=True)

    def header(self, text: str) -> None:
        """Print a prominent header with borders."""
        if self.quiet:
            return
        width = max(len(text) + 4, 50)
        border = self._c(Symbols.BOX_H * width, Colors.CYAN) if self.color else "-" * width

        self.print()
        self.print(border)
        self.print(self._c(f"  {text}", Colors.BOLD, Colors.CYAN))
        self.print(border)
        self.print()

    def success(self, text: str) -> None:
        """Print a success message with checkmark."""
        self.print(self._c(f"  {Symbols.CHECK} {text}", Colors.GREEN))

    def error(self, text: str) -> None:
        """
        Print an error message with cross symbol.

        Always prints, even in quiet mode.
        """
        print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED), flush=True)

    def detail(self, text: str) -> None:
        """Print detail text in dimmed color with extra indentation."""
        self.print(self._c(f"    {text}", Colors.DIM))

    def hint(self, text: str) -> None:
        """Print a remediation hint. Always prints, even in quiet mode."""
        print(self._c(f"    {text}", Colors.DIM), flush=True)

    def debug(self, text: str) -> None:
        """Print debug message (only visible in verbose mode)."""
        if self.verbose:
            self.print(self._c(f"  [DEBUG] {text}", Colors.DIM))

    def config_errors(self, errors: list[str]) -> None:
        """Print configuration errors. Always prints, even in quiet mode."""
        self.error("Configuration error" + ("s:" if len(errors) > 1 else ":"))
        for error in errors:
            self.hint(f"{Symbols.DOT} {error}")


class WatchDisplay:
    """
    Watch-mode status lines.

    Wired to the ChangePropagationLoop callbacks by the CLI.
    """

    def __init__(self, color: bool = True, quiet: bool = False, console: Console | None = None):
        self.console = console or Console(color=color, quiet=quiet)

    @staticmethod
    def _timestamp() -> str:
        return datetime.now().strftime("%H:%M:%S")

    def show_start(self, first: FileSnapshot, second: FileSnapshot, model: str) -> None:
        """Show the banner when watch mode starts."""
        c = self.console
        c.header("llm-translate Watch Mode")
        c.print(f"  Watching {first.name} {Symbols.SYNC} {second.name}")
        c.detail(f"Model: {model}")
        c.print("  Press Ctrl+C to stop")
        c.print()

    def show_auto_translate(self, source: FileSnapshot, target: FileSnapshot) -> None:
        """Show the startup auto-sync notice."""
        c = self.console
        c.print(
            c._c(f"[{self._timestamp()}] ", Colors.DIM)
            + c._c(
                f"{target.name} is empty, auto-translating from {source.name}...",
                Colors.BLUE,
            )
        )

    def show_change_detected(self, change: FileChange) -> None:
        """Show a change-detected notice with its timestamp."""
        c = self.console
        name = Path(change.path).name
        stamp = change.detected_at.strftime("%H:%M:%S")
        c.print()
        c.print(c._c(f"[{stamp}] ", Colors.DIM) + f"Change detected in {name}, translating...")

    def show_translation_complete(self, result: TransformationResult) -> None:
        """Show the outcome of one transformation."""
        c = self.console
        if result.success:
            c.success(f"Updated {result.target_name} ({result.duration:.1f}s)")
        else:
            c.error(
                f"Translation error ({result.source_name} {Symbols.ARROW} {result.target_name})"
            )
            if result.error:
                c.hint(result.error)

    def show_stop(self, stats: WatchStats) -> None:
        """Show the session summary."""
        c = self.console
        c.print()
        c.header("Watch Mode Stopped")
        c.print(f"  Uptime: {stats.uptime_formatted}")
        c.print(f"  Changes detected: {stats.changes_detected}")
        c.print(
            f"  Translations: {stats.translations_successful} successful, "
            f"{stats.translations_failed} failed"
        )
        if stats.notifications_dropped:
            c.detail(f"{stats.notifications_dropped} notification(s) skipped while busy")
        c.print()
