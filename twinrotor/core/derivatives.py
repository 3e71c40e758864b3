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
Derivative functions for the twin-rotor model
ツインロータモデルの微分関数

Every function has the integrator signature f(x, t, aux). The time
argument is unused by this model. aux is a small named tuple whose fields
list exactly which frozen state values the equation depends on.
すべての関数は積分器のシグネチャ f(x, t, aux) を持つ。
"""

from typing import NamedTuple

from .params import MotorParams, AirframeParams


class CurrentInputs(NamedTuple):
    """Inputs of di/dt / di/dt の入力"""
    omega: float  # rad/s
    u: float      # V


class SpeedInputs(NamedTuple):
    """Inputs of dω/dt / dω/dt の入力"""
    i: float      # A


class RateInputs(NamedTuple):
    """Inputs of dq/dt / dq/dt の入力"""
    omega_right: float  # rad/s
    omega_left: float   # rad/s


class AttitudeInputs(NamedTuple):
    """Inputs of dθ/dt / dθ/dt の入力"""
    q: float  # rad/s


class MotorModel:
    """
    Electrical and mechanical equations of one DC motor with propeller.
    プロペラ付きDCモータの電気・機械方程式

    Usage:
        model = MotorModel(MotorParams())
        di = model.i_dot(i, t, CurrentInputs(omega, u))
    """

    def __init__(self, params: MotorParams):
        self.params = params

    def i_dot(self, i: float, t: float, aux: CurrentInputs) -> float:
        """
        Current derivative: L·di/dt + R·i + K·ω = u
        電流の微分

        Returns:
            di/dt (A/s)
        """
        p = self.params
        omega, u = aux
        return (u - p.Rm * i - p.Km * omega) / p.Lm

    def omega_dot(self, omega: float, t: float, aux: SpeedInputs) -> float:
        """
        Angular velocity derivative: J·dω/dt + D·ω + Cq·ω² = K·i
        角速度の微分

        Returns:
            dω/dt (rad/s²)
        """
        p = self.params
        (i,) = aux
        load_torque = p.Cq * omega * omega
        return (p.Km * i - p.Dm * omega - load_torque) / p.Jm


class AirframeModel:
    """
    Rotational dynamics about the differential-thrust axis.
    差動推力軸まわりの回転ダイナミクス
    """

    def __init__(self, params: AirframeParams):
        self.params = params

    def q_dot(self, q: float, t: float, aux: RateInputs) -> float:
        """
        Rate derivative: J_drone·dq/dt = (T_R - T_L)·l
        角速度の微分
        """
        p = self.params
        omega_right, omega_left = aux
        thrust_right = p.Ct * omega_right * omega_right
        thrust_left = p.Ct * omega_left * omega_left
        return (thrust_right - thrust_left) * p.arm_length / p.Jd


def theta_dot(theta: float, t: float, aux: AttitudeInputs) -> float:
    """Attitude derivative: dθ/dt = q / 姿勢角の微分"""
    return aux.q
