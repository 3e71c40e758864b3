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
Fixed-step Runge-Kutta integrator
固定ステップ ルンゲ・クッタ積分器

Advances one scalar state variable by one step of the classical
4th-order Runge-Kutta method.
古典的4次ルンゲ・クッタ法で1つのスカラー状態変数を1ステップ進める。
"""

from typing import Callable, Sequence

# f(x, t, aux) -> dx/dt
Derivative = Callable[[float, float, Sequence[float]], float]


def rk4(dxdt: Derivative, x: float, t: float, h: float, aux: Sequence[float]) -> float:
    """
    One RK4 step for a scalar state.
    スカラー状態のRK4 1ステップ

    The auxiliary values are held constant over all four stages; they are
    the other state variables frozen at the start of the step.
    補助値は4段すべてで一定（ステップ開始時に凍結した他の状態変数）。

    Args:
        dxdt: Derivative function f(x, t, aux)
        x: Current value / 現在値
        t: Current time (s) / 現在時刻
        h: Step size (s); h=0 returns x unchanged / ステップ幅
        aux: Frozen auxiliary inputs / 凍結された補助入力

    Returns:
        Value after one step / 1ステップ後の値
    """
    k1 = h * dxdt(x, t, aux)
    k2 = h * dxdt(x + 0.5 * k1, t + 0.5 * h, aux)
    k3 = h * dxdt(x + 0.5 * k2, t + 0.5 * h, aux)
    k4 = h * dxdt(x + k3, t + h, aux)
    return x + (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0
