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
Twin-rotor simulation loop
ツインロータシミュレーションループ

One step = freeze state -> RK4 for each scalar state -> advance time ->
emit output. Derivatives only ever see frozen values, so the update of
the coupled system is synchronous and the motor order does not matter.
1ステップ = 状態凍結 → 各スカラー状態のRK4 → 時刻更新 → 出力。

Usage:
    sim = Simulation(SimConfig())
    sim.run(TextPrinter())
"""

from enum import Enum
from typing import Callable, Iterable, Optional

from .derivatives import (
    MotorModel,
    AirframeModel,
    theta_dot,
    CurrentInputs,
    SpeedInputs,
    RateInputs,
    AttitudeInputs,
)
from .integrator import rk4
from .params import SimConfig, DEFAULT_CONFIG
from .state import Side, MotorPair, MotorState, DroneState, VehicleState, StateRecord, save_state

Output = Callable[[StateRecord], None]


class Phase(Enum):
    """Simulation phase / シミュレーションフェーズ"""
    INITIALIZING = "initializing"
    STEPPING = "stepping"
    DONE = "done"


class Simulation:
    """
    Fixed-step simulation of two motors and one airframe axis.
    2モータ＋機体1軸の固定ステップシミュレーション
    """

    def __init__(self, config: SimConfig = DEFAULT_CONFIG):
        """
        Args:
            config: Immutable run configuration / 不変な実行設定
        """
        self.config = config
        self.motor_model = MotorModel(config.motor)
        self.airframe_model = AirframeModel(config.airframe)

        self.state = VehicleState()
        self.phase = Phase.INITIALIZING
        self.step_count = 0
        self.time = 0.0
        self._output: Optional[Output] = None

    @property
    def h(self) -> float:
        return self.config.step_size

    @property
    def diverged(self) -> bool:
        """True once any live state value is non-finite / 発散判定"""
        return not self.state.is_finite()

    def initialize(self, output: Optional[Output] = None) -> StateRecord:
        """
        Set initial conditions and emit the t=0 record.
        初期条件を設定しt=0のレコードを出力

        Args:
            output: Callable receiving each StateRecord (optional)

        Returns:
            The initial record
        """
        cfg = self.config
        self.state = VehicleState(
            motors=MotorPair(
                right=MotorState(i=0.0, omega=0.0, u=cfg.voltage_right),
                left=MotorState(i=0.0, omega=0.0, u=cfg.voltage_left),
            ),
            drone=DroneState(q=0.0, theta=0.0),
        )
        self.step_count = 0
        self.time = 0.0
        self._output = output

        record = self._emit()
        self.phase = Phase.STEPPING if cfg.num_steps > 0 else Phase.DONE
        return record

    def step(self, motor_order: Optional[Iterable[Side]] = None) -> StateRecord:
        """
        Advance every state variable by one step.
        全状態変数を1ステップ進める

        Args:
            motor_order: Order in which the motors are updated
                         (default RIGHT, LEFT). Any order gives the same
                         result since only frozen values are read.

        Returns:
            The record emitted after the step

        Raises:
            RuntimeError: when called before initialize() or after DONE
        """
        if self.phase is not Phase.STEPPING:
            raise RuntimeError(f"Cannot step in phase {self.phase.value}")

        t = self.time
        h = self.h
        motors = self.state.motors
        drone = self.state.drone

        save_state(motors, drone)

        order = MotorPair.SIDES if motor_order is None else tuple(motor_order)
        for side in order:
            m = motors[side]
            m.i = rk4(self.motor_model.i_dot, m.i_, t, h, CurrentInputs(m.omega_, m.u_))
            m.omega = rk4(self.motor_model.omega_dot, m.omega_, t, h, SpeedInputs(m.i_))

        drone.q = rk4(
            self.airframe_model.q_dot, drone.q_, t, h,
            RateInputs(motors.right.omega_, motors.left.omega_),
        )
        drone.theta = rk4(theta_dot, drone.theta_, t, h, AttitudeInputs(drone.q_))

        self.step_count += 1
        self.time = self.step_count * h

        record = self._emit()
        if self.step_count >= self.config.num_steps:
            self.phase = Phase.DONE
        return record

    def run(self, output: Optional[Output] = None, stop_on_divergence: bool = False) -> int:
        """
        Run from t=0 to the configured end time.
        t=0 から終了時刻まで実行

        Args:
            output: Callable receiving each StateRecord (optional)
            stop_on_divergence: End the run at the first step that leaves
                                a non-finite value / 発散時に停止

        Returns:
            Number of steps taken / 実行ステップ数
        """
        self.initialize(output)
        while self.phase is Phase.STEPPING:
            self.step()
            if stop_on_divergence and self.diverged:
                self.phase = Phase.DONE
        return self.step_count

    def record(self) -> StateRecord:
        """Current state as an output record / 現在状態のレコード"""
        return StateRecord.from_state(self.time, self.state)

    def _emit(self) -> StateRecord:
        record = self.record()
        if self._output is not None:
            self._output(record)
        return record
