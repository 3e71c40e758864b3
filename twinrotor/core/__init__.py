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

# Core simulation modules
# シミュレーションコアモジュール
"""
Core simulation components: parameters, derivatives, integrator, state, loop.
コアシミュレーションコンポーネント：パラメータ、微分関数、積分器、状態、ループ
"""

from .params import (
    MotorParams,
    AirframeParams,
    SimConfig,
    DEFAULT_CONFIG,
    load_config,
    save_config,
    equilibrium_omega,
    equilibrium_current,
    rate_acceleration,
    compute_steady_state,
)
from .integrator import rk4
from .derivatives import (
    MotorModel,
    AirframeModel,
    theta_dot,
    CurrentInputs,
    SpeedInputs,
    RateInputs,
    AttitudeInputs,
)
from .state import (
    RADPS2RPM,
    Side,
    MotorState,
    DroneState,
    MotorPair,
    VehicleState,
    StateRecord,
    save_state,
)
from .simulation import Phase, Simulation

__all__ = [
    # Parameters
    'MotorParams',
    'AirframeParams',
    'SimConfig',
    'DEFAULT_CONFIG',
    'load_config',
    'save_config',
    'equilibrium_omega',
    'equilibrium_current',
    'rate_acceleration',
    'compute_steady_state',
    # Integrator
    'rk4',
    # Derivatives
    'MotorModel',
    'AirframeModel',
    'theta_dot',
    'CurrentInputs',
    'SpeedInputs',
    'RateInputs',
    'AttitudeInputs',
    # State
    'RADPS2RPM',
    'Side',
    'MotorState',
    'DroneState',
    'MotorPair',
    'VehicleState',
    'StateRecord',
    'save_state',
    # Loop
    'Phase',
    'Simulation',
]
