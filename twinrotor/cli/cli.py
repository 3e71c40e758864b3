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
twinrotor CLI - Main entry point

twinrotor <command> [options]

Command-line interface for the twin-rotor multicopter simulation.
ツインロータ・マルチコプタシミュレーションのコマンドラインインターフェース。
"""

import argparse
import sys
import traceback
from typing import Optional, List

from .. import __version__
from .commands import run, params, plot, version
from .utils import console


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser"""
    parser = argparse.ArgumentParser(
        prog="twinrotor",
        description="Twin-rotor multicopter simulation (RK4, fixed step)",
        epilog="Run 'twinrotor <command> --help' for more information on a command.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"twinrotor {__version__}",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug messages",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    run.register(subparsers)
    params.register(subparsers)
    plot.register(subparsers)
    version.register(subparsers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point

    Args:
        argv: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        console.set_color(False)
    console.set_verbose(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        console.print("\nInterrupted")
        return 130
    except Exception as e:
        console.error(f"Unexpected error: {e}")
        console.debug(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
