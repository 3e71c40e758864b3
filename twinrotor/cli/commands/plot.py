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
twinrotor plot - Plot a trajectory CSV

Draws motor currents, motor speeds, airframe rate and attitude from a
file written by 'twinrotor run --format csv'.
"""

import argparse

from ..utils import console

COMMAND_NAME = "plot"
COMMAND_HELP = "Plot a trajectory CSV"


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register command with CLI"""
    parser = subparsers.add_parser(
        COMMAND_NAME,
        help=COMMAND_HELP,
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "csv",
        help="Trajectory CSV file",
    )
    parser.add_argument(
        "-s", "--save",
        metavar="PNG",
        help="Save figure to file",
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not open a window",
    )
    parser.set_defaults(func=run)


def run(args: argparse.Namespace) -> int:
    """Execute plot command"""
    # matplotlib/pandas are only needed here
    from ...tools.plot_trajectory import load_trajectory, plot_trajectory

    try:
        df = load_trajectory(args.csv)
    except (OSError, ValueError) as e:
        console.error(f"Cannot read {args.csv}: {e}")
        return 1

    console.info(f"Loaded {len(df)} samples from {args.csv}")
    plot_trajectory(df, save_path=args.save, show=not args.no_show)
    if args.save:
        console.success(f"Saved: {args.save}")
    return 0
