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
Vehicle state and snapshot manager
機体状態とスナップショット管理

Live fields (i, omega, u, q, theta) are written by the integrator. The
trailing-underscore fields hold the values frozen at the start of the
current step; every derivative evaluation inside a step reads only those.
ライブ値は積分器が更新し、末尾アンダースコアの値はステップ開始時に凍結した値。
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Tuple

RADPS2RPM = 60.0 / (2.0 * math.pi)


class Side(Enum):
    """Motor position / モータ位置"""
    RIGHT = "right"
    LEFT = "left"


@dataclass
class MotorState:
    """
    State of one motor.
    1つのモータの状態

    Attributes:
        i: Current (A) / 電流
        omega: Angular velocity (rad/s) / 角速度
        u: Applied voltage (V) / 印加電圧
        i_, omega_, u_: Frozen copies / 凍結コピー
    """
    i: float = 0.0
    omega: float = 0.0
    u: float = 0.0
    i_: float = 0.0
    omega_: float = 0.0
    u_: float = 0.0

    def freeze(self) -> None:
        self.i_ = self.i
        self.omega_ = self.omega
        self.u_ = self.u

    @property
    def rpm(self) -> float:
        return self.omega * RADPS2RPM


@dataclass
class DroneState:
    """
    Airframe state about the differential-thrust axis.
    差動推力軸まわりの機体状態

    Attributes:
        q: Angular rate (rad/s) / 角速度
        theta: Attitude angle (rad) / 姿勢角
        q_, theta_: Frozen copies / 凍結コピー
    """
    q: float = 0.0
    theta: float = 0.0
    q_: float = 0.0
    theta_: float = 0.0

    def freeze(self) -> None:
        self.q_ = self.q
        self.theta_ = self.theta


class MotorPair:
    """
    The two motors keyed by Side.
    Sideをキーとする2つのモータ

    Iteration yields (side, motor) in RIGHT, LEFT order.
    """

    SIDES: Tuple[Side, Side] = (Side.RIGHT, Side.LEFT)

    def __init__(self, right: MotorState = None, left: MotorState = None):
        self._motors: Dict[Side, MotorState] = {
            Side.RIGHT: right if right is not None else MotorState(),
            Side.LEFT: left if left is not None else MotorState(),
        }

    def __getitem__(self, side: Side) -> MotorState:
        return self._motors[side]

    def __iter__(self) -> Iterator[Tuple[Side, MotorState]]:
        for side in self.SIDES:
            yield side, self._motors[side]

    def __len__(self) -> int:
        return len(self._motors)

    @property
    def right(self) -> MotorState:
        return self._motors[Side.RIGHT]

    @property
    def left(self) -> MotorState:
        return self._motors[Side.LEFT]


@dataclass
class VehicleState:
    """State bundle owned by one simulation / 1つのシミュレーションが所有する状態"""
    motors: MotorPair = field(default_factory=MotorPair)
    drone: DroneState = field(default_factory=DroneState)

    def is_finite(self) -> bool:
        """
        True when no live value is inf or nan.
        ライブ値に inf / nan が無ければ True

        An explicit step that is too large for the motor time constants
        makes the state blow up; this is how a caller notices.
        """
        values = [self.drone.q, self.drone.theta]
        for _, motor in self.motors:
            values.extend((motor.i, motor.omega, motor.u))
        return all(math.isfinite(v) for v in values)


def save_state(motors: MotorPair, drone: DroneState) -> None:
    """
    Freeze every live value of both motors and the drone.
    両モータと機体のライブ値をすべて凍結

    Must run once per step, before any integrator call of that step.
    """
    for _, motor in motors:
        motor.freeze()
    drone.freeze()


@dataclass(frozen=True)
class StateRecord:
    """
    Output record emitted after every step (and at t=0).
    各ステップ後（およびt=0）に出力されるレコード

    Motor speeds are in rev/min.
    """
    time: float            # s
    current_right: float   # A
    current_left: float    # A
    rpm_right: float       # rev/min
    rpm_left: float        # rev/min
    rate: float            # rad/s
    attitude: float        # rad

    FIELDS = ("time", "current_right", "current_left",
              "rpm_right", "rpm_left", "rate", "attitude")

    @classmethod
    def from_state(cls, t: float, state: VehicleState) -> "StateRecord":
        motors = state.motors
        return cls(
            time=t,
            current_right=motors.right.i,
            current_left=motors.left.i,
            rpm_right=motors.right.omega * RADPS2RPM,
            rpm_left=motors.left.omega * RADPS2RPM,
            rate=state.drone.q,
            attitude=state.drone.theta,
        )

    def as_tuple(self) -> Tuple[float, ...]:
        return tuple(getattr(self, name) for name in self.FIELDS)
