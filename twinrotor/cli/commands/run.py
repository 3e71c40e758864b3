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
twinrotor run - Run the twin-rotor simulation

Integrates both motors and the airframe from t=0 to the end time and
writes one record per step.
両モータと機体を t=0 から終了時刻まで積分し、各ステップのレコードを出力します。

Examples:
    twinrotor run                          # nominal run, text to stdout
    twinrotor run -o out.csv --format csv  # CSV file
    twinrotor run --voltage-left 7.5       # symmetric drive
"""

import argparse
import math
import sys
import time
from contextlib import ExitStack

from ...core import Simulation, SimConfig, DEFAULT_CONFIG, load_config
from ...interfaces import TextPrinter, CsvLogger, QueuedOutput
from ..utils import console

COMMAND_NAME = "run"
COMMAND_HELP = "Run the simulation"


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Options shared by commands that build a SimConfig"""
    parser.add_argument(
        "-c", "--config",
        help="JSON configuration file",
    )
    parser.add_argument(
        "--dt",
        type=float,
        help=f"Step size in seconds (default: {DEFAULT_CONFIG.step_size})",
    )
    parser.add_argument(
        "--end-time",
        type=float,
        help=f"End time in seconds (default: {DEFAULT_CONFIG.end_time})",
    )
    parser.add_argument(
        "--voltage-right",
        type=float,
        help=f"Right motor voltage (default: {DEFAULT_CONFIG.voltage_right})",
    )
    parser.add_argument(
        "--voltage-left",
        type=float,
        help=f"Left motor voltage (default: {DEFAULT_CONFIG.voltage_left})",
    )


def config_from_args(args: argparse.Namespace) -> SimConfig:
    """
    Build the run configuration: file (or defaults), then CLI overrides.

    Raises:
        ValueError: invalid configuration
        OSError: unreadable config file
    """
    config = load_config(args.config) if args.config else DEFAULT_CONFIG

    overrides = {}
    if args.dt is not None:
        overrides["step_size"] = args.dt
    if args.end_time is not None:
        overrides["end_time"] = args.end_time
    if args.voltage_right is not None:
        overrides["voltage_right"] = args.voltage_right
    if args.voltage_left is not None:
        overrides["voltage_left"] = args.voltage_left

    return config.replace(**overrides) if overrides else config


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register command with CLI"""
    parser = subparsers.add_parser(
        COMMAND_NAME,
        help=COMMAND_HELP,
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_config_arguments(parser)
    parser.add_argument(
        "-f", "--format",
        choices=["text", "csv"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--queued",
        action="store_true",
        help="Write output from a separate thread",
    )
    parser.add_argument(
        "--stop-on-divergence",
        action="store_true",
        help="Stop as soon as a state value becomes inf/nan",
    )
    parser.add_argument(
        "--plot",
        metavar="PNG",
        help="Save a plot of the trajectory (requires --format csv and --output)",
    )
    parser.set_defaults(func=run)


def run(args: argparse.Namespace) -> int:
    """Execute run command"""
    # Trajectory on stdout: keep status lines off it
    console.reserve_stdout(not args.output)
    try:
        return _simulate(args)
    finally:
        console.reserve_stdout(False)


def _simulate(args: argparse.Namespace) -> int:
    try:
        config = config_from_args(args)
    except (ValueError, OSError) as e:
        console.error(f"Invalid configuration: {e}")
        return 1

    if args.plot and not (args.format == "csv" and args.output):
        console.error("--plot requires --format csv and --output")
        return 1

    console.info(f"Simulating {config.end_time}s with h={config.step_size}s "
                 f"({config.num_steps} steps)")
    console.debug(f"Voltages: right={config.voltage_right}V, left={config.voltage_left}V")

    sim = Simulation(config)
    start_time = time.perf_counter()

    try:
        with ExitStack() as stack:
            if args.format == "csv":
                metadata = {
                    "step_size": config.step_size,
                    "end_time": config.end_time,
                    "voltage_right": config.voltage_right,
                    "voltage_left": config.voltage_left,
                }
                if args.output:
                    logger = CsvLogger(args.output, metadata=metadata)
                else:
                    logger = CsvLogger(metadata=metadata, stream=sys.stdout)
                sink = stack.enter_context(logger)
            else:
                stream = stack.enter_context(open(args.output, "w")) if args.output else sys.stdout
                sink = TextPrinter(stream)

            if args.queued:
                sink = stack.enter_context(QueuedOutput(sink))

            steps = sim.run(sink, stop_on_divergence=args.stop_on_divergence)
    except OSError as e:
        console.error(f"Failed to write output: {e}")
        return 1

    elapsed = time.perf_counter() - start_time
    final = sim.record()

    if sim.diverged:
        console.warning(f"State became non-finite by t={sim.time:.6f}s; "
                        f"try a smaller step size")
    else:
        console.success(f"Done: {steps} steps in {elapsed:.2f}s")
    console.debug(f"Final: rpm_R={final.rpm_right:.1f}, rpm_L={final.rpm_left:.1f}, "
                  f"q={final.rate:.6f}, theta={math.degrees(final.attitude):.4f}deg")

    if args.plot:
        from ...tools.plot_trajectory import load_trajectory, plot_trajectory
        plot_trajectory(load_trajectory(args.output), save_path=args.plot, show=False)
        console.success(f"Saved: {args.plot}")

    return 0
