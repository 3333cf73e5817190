"""
Shared output formatting for the manifest formatter.
"""

import sys

from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TaskID, TextColumn
from rich.text import Text

# ANSI color codes
RED = '\033[0;31m'
GREEN = '\033[0;32m'
YELLOW = '\033[1;33m'
DIM = '\033[2m'
NC = '\033[0m'  # No color


def print_ok(msg: str):
    """Print a success message with checkmark."""
    print(f"{GREEN}✓{NC} {msg}")


def print_error(msg: str):
    """Print an error message to stderr."""
    print(f"{RED}ERROR:{NC} {msg}", file=sys.stderr)


def print_warning(msg: str):
    """Print a warning message."""
    print(f"{YELLOW}⚠{NC} {msg}")


def print_dim(msg: str):
    """Print dimmed/secondary text."""
    print(f"{DIM}{msg}{NC}")


class Reporter:
    """Output sink for one formatting run.

    Owned by the batch driver and passed to every per-file call. While a
    progress bar is live, permanent messages go through its console so they
    are printed above the bar instead of tearing it. Quiet mode drops
    everything except errors.
    """

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.progress: Progress | None = None
        self._task: TaskID | None = None

    def start_progress(self, total: int, message: str):
        """Show an ephemeral progress bar (like cargo's "Compiling" line)."""
        if self.quiet:
            return
        self.progress = Progress(
            SpinnerColumn(style="green"),
            TextColumn("{task.fields[status]}"),
            BarColumn(complete_style="cyan", finished_style="blue"),
            MofNCompleteColumn(),
            transient=True,
        )
        self.progress.start()
        self._task = self.progress.add_task("fmt-toml", total=total, status=message)

    def advance(self):
        if self.progress is not None and self._task is not None:
            self.progress.advance(self._task)

    def println(self, msg: str = ""):
        """Print a permanent message."""
        if self.quiet:
            return
        if self.progress is not None:
            self.progress.console.print(Text.from_ansi(msg), soft_wrap=True)
        else:
            print(msg)

    def error(self, msg: str):
        """Print an error. Errors are shown even in quiet mode."""
        if self.progress is not None:
            self.progress.console.print(Text.from_ansi(f"{RED}ERROR:{NC} {msg}"), soft_wrap=True)
        else:
            print_error(msg)

    def finish(self):
        """Clear the progress bar, if one is showing."""
        if self.progress is not None:
            self.progress.stop()
            self.progress = None
            self._task = None
