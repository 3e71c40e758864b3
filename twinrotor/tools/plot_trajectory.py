#!/usr/bin/env python3
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
Trajectory Time Series Visualization
軌跡時系列可視化

Plots motor currents, motor speeds, airframe rate and attitude from a
CSV written by CsvLogger.
CsvLogger が出力したCSVから電流・回転数・角速度・姿勢角をプロット。
"""

import sys
from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..core.state import StateRecord


def load_trajectory(csv_path: Union[str, Path]) -> pd.DataFrame:
    """Load a trajectory CSV (metadata comment lines skipped) / 軌跡CSVを読み込み"""
    df = pd.read_csv(csv_path, comment='#')
    missing = set(StateRecord.FIELDS) - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in {csv_path}: {', '.join(sorted(missing))}")
    return df


def plot_trajectory(df: pd.DataFrame, save_path: Optional[Union[str, Path]] = None, show: bool = True):
    """
    Plot a trajectory DataFrame.
    軌跡をプロット

    Args:
        df: DataFrame with StateRecord columns
        save_path: PNG output path (optional)
        show: Call plt.show() at the end

    Returns:
        matplotlib Figure
    """
    fig, axes = plt.subplots(4, 1, figsize=(12, 12), sharex=True)
    t = df['time']

    ax1 = axes[0]
    ax1.plot(t, df['current_right'], label='Right', alpha=0.8)
    ax1.plot(t, df['current_left'], label='Left', alpha=0.8)
    ax1.set_ylabel('Current [A]')
    ax1.set_title('Motor Current')
    ax1.legend(loc='upper right')
    ax1.grid(True, alpha=0.3)

    ax2 = axes[1]
    ax2.plot(t, df['rpm_right'], label='Right', alpha=0.8)
    ax2.plot(t, df['rpm_left'], label='Left', alpha=0.8)
    ax2.set_ylabel('Speed [rpm]')
    ax2.set_title('Motor Speed')
    ax2.legend(loc='lower right')
    ax2.grid(True, alpha=0.3)

    ax3 = axes[2]
    ax3.plot(t, df['rate'], color='tab:green')
    ax3.set_ylabel('q [rad/s]')
    ax3.set_title('Airframe Rate')
    ax3.grid(True, alpha=0.3)
    ax3.axhline(y=0, color='k', linestyle='-', linewidth=0.5)

    ax4 = axes[3]
    ax4.plot(t, np.rad2deg(df['attitude']), color='tab:red')
    ax4.set_ylabel('θ [deg]')
    ax4.set_xlabel('Time [s]')
    ax4.set_title('Attitude')
    ax4.grid(True, alpha=0.3)
    ax4.axhline(y=0, color='k', linestyle='-', linewidth=0.5)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150)

    if show:
        plt.show()
    return fig


def print_statistics(df: pd.DataFrame):
    """Print final values and ranges / 最終値と範囲を表示"""
    print("\n=== Statistics ===")
    for name in StateRecord.FIELDS[1:]:
        col = df[name]
        print(f"{name:>14}: final={col.iloc[-1]:.6f}, range=[{col.min():.6f}, {col.max():.6f}]")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m twinrotor.tools.plot_trajectory <trajectory.csv>")
        sys.exit(1)

    data = load_trajectory(sys.argv[1])
    print(f"Loaded {len(data)} samples from {sys.argv[1]}")
    print_statistics(data)
    png_path = sys.argv[1].replace('.csv', '_trajectory.png')
    plot_trajectory(data, save_path=png_path)
    print(f"Saved: {png_path}")
