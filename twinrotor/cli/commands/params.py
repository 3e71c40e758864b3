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
twinrotor params - Show simulation parameters

Displays the physical constants of the run and the derived steady-state
values (motor speed, current, thrust, airframe angular acceleration).
物理定数と定常状態の導出値を表示します。
"""

import argparse

from ...core import compute_steady_state
from ..utils import console
from .run import add_config_arguments, config_from_args

COMMAND_NAME = "params"
COMMAND_HELP = "Show parameters and steady-state values"


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register command with CLI"""
    parser = subparsers.add_parser(
        COMMAND_NAME,
        help=COMMAND_HELP,
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_config_arguments(parser)
    parser.set_defaults(func=run)


def run(args: argparse.Namespace) -> int:
    """Execute params command"""
    try:
        config = config_from_args(args)
    except (ValueError, OSError) as e:
        console.error(f"Invalid configuration: {e}")
        return 1

    m = config.motor
    a = config.airframe

    console.header("Motor")
    console.table(
        ["Name", "Value", "Unit"],
        [
            ["Lm", f"{m.Lm:.4e}", "H"],
            ["Rm", f"{m.Rm:.4e}", "Ohm"],
            ["Km", f"{m.Km:.4e}", "Nm/A"],
            ["Jm", f"{m.Jm:.4e}", "kg m^2"],
            ["Cq", f"{m.Cq:.4e}", "Nm s^2/rad^2"],
            ["Dm", f"{m.Dm:.4e}", "Nm s/rad"],
            ["L/R", f"{m.electrical_time_constant:.4e}", "s"],
            ["J R/K^2", f"{m.mechanical_time_constant:.4e}", "s"],
        ],
    )

    console.print()
    console.header("Airframe")
    console.table(
        ["Name", "Value", "Unit"],
        [
            ["Ct", f"{a.Ct:.4e}", "N s^2/rad^2"],
            ["arm_length", f"{a.arm_length:.4e}", "m"],
            ["Jd", f"{a.Jd:.4e}", "kg m^2"],
            ["mass (unused)", f"{a.mass:.4e}", "kg"],
        ],
    )

    console.print()
    console.header("Run")
    console.print(f"  Voltage: right={config.voltage_right} V, left={config.voltage_left} V")
    console.print(f"  Step size: {config.step_size} s, end time: {config.end_time} s "
                  f"({config.num_steps} steps)")

    ss = compute_steady_state(config)
    console.print()
    console.header("Steady state")
    console.table(
        ["", "Right", "Left"],
        [
            ["omega [rad/s]", f"{ss['omega_right']:.2f}", f"{ss['omega_left']:.2f}"],
            ["speed [rpm]", f"{ss['rpm_right']:.1f}", f"{ss['rpm_left']:.1f}"],
            ["current [A]", f"{ss['current_right']:.4f}", f"{ss['current_left']:.4f}"],
            ["thrust [N]", f"{ss['thrust_right']:.4f}", f"{ss['thrust_left']:.4f}"],
        ],
    )
    console.print(f"  Airframe q_dot at steady state: {ss['q_dot']:.6f} rad/s^2")

    if config.step_size > m.electrical_time_constant:
        console.warning("Step size exceeds the electrical time constant; "
                        "the explicit scheme may diverge")

    return 0
