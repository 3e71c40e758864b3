# MIT License
#
# Copyright (c) 2025 Kouhei Ito
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:

# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.

# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Console output utilities with color support

Reports, tables and status lines go to stdout; warnings and errors go to
stderr. A command whose primary output is written to stdout calls
reserve_stdout(True) so that its status lines move to stderr too.
レポートは stdout、警告・エラーは stderr に出力。
"""

import os
import sys
from typing import TextIO


class Console:
    """Console output with ANSI color support"""

    # ANSI color codes
    COLORS = {
        "reset": "\033[0m",
        "bold": "\033[1m",
        "red": "\033[31m",
        "green": "\033[32m",
        "yellow": "\033[33m",
        "blue": "\033[34m",
        "cyan": "\033[36m",
        "gray": "\033[90m",
    }

    def __init__(self):
        self._verbose = False
        self._stdout_reserved = False
        self._color_enabled = self._detect_color_support()

    @property
    def out(self) -> TextIO:
        # Resolved on every call so that redirected/captured streams are honoured
        return sys.stderr if self._stdout_reserved else sys.stdout

    @property
    def err(self) -> TextIO:
        return sys.stderr

    def _detect_color_support(self) -> bool:
        """Detect if terminal supports colors"""
        if os.environ.get("NO_COLOR"):
            return False
        isatty = getattr(sys.stdout, "isatty", None)
        return bool(isatty and isatty())

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled"""
        if not self._color_enabled:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def _emit(self, prefix: str, color: str, message: str, stream: TextIO) -> None:
        print(f"{self._colorize(f'[{prefix}]', color)} {message}", file=stream)

    def set_verbose(self, enabled: bool) -> None:
        """Enable or disable verbose output"""
        self._verbose = enabled

    def set_color(self, enabled: bool) -> None:
        """Enable or disable color output"""
        self._color_enabled = enabled

    def reserve_stdout(self, enabled: bool) -> None:
        """Send everything to stderr while stdout carries data"""
        self._stdout_reserved = enabled

    def info(self, message: str, prefix: str = "INFO") -> None:
        self._emit(prefix, "blue", message, self.out)

    def success(self, message: str, prefix: str = "OK") -> None:
        self._emit(prefix, "green", message, self.out)

    def warning(self, message: str, prefix: str = "WARN") -> None:
        self._emit(prefix, "yellow", message, self.err)

    def error(self, message: str, prefix: str = "ERROR") -> None:
        self._emit(prefix, "red", message, self.err)

    def debug(self, message: str, prefix: str = "DEBUG") -> None:
        """Print debug message (only in verbose mode)"""
        if self._verbose:
            self._emit(prefix, "gray", message, self.out)

    def print(self, message: str = "") -> None:
        """Print plain message"""
        print(message, file=self.out)

    def header(self, title: str, char: str = "=", width: int = 60) -> None:
        """Print section header"""
        line = char * width
        self.print(self._colorize(line, "cyan"))
        self.print(self._colorize(f" {title}", "bold"))
        self.print(self._colorize(line, "cyan"))

    def table(self, headers: list, rows: list) -> None:
        """Print simple table"""
        col_widths = [len(str(h)) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                col_widths[i] = max(col_widths[i], len(str(cell)))

        header_line = " | ".join(
            str(h).ljust(col_widths[i]) for i, h in enumerate(headers)
        )
        self.print(self._colorize(header_line, "bold"))
        self.print("-" * len(header_line))

        for row in rows:
            self.print(" | ".join(
                str(cell).ljust(col_widths[i]) for i, cell in enumerate(row)
            ))


# Global console instance
console = Console()
