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
Simulation parameters
シミュレーションパラメータ

Immutable configuration for one twin-rotor run: motor constants, airframe
constants, drive voltages, step size and end time.
1回のツインロータシミュレーション用の不変な設定。

Motor electrical equation:
モータ電気方程式:

  L·di/dt + R·i + K·ω = u

Motor mechanical equation (propeller load torque Cq·ω²):
モータ機械方程式（プロペラ負荷トルク Cq·ω²）:

  J·dω/dt + D·ω + Cq·ω² = K·i

Airframe (rotation about the differential-thrust axis):
機体（差動推力軸まわりの回転）:

  J_drone·dq/dt = (Ct·ω_R² - Ct·ω_L²)·l
  dθ/dt = q
"""

import json
import math
from dataclasses import dataclass, field, asdict, fields, replace as _replace
from pathlib import Path
from typing import Any, Dict, Union


@dataclass(frozen=True)
class MotorParams:
    """
    Motor-propeller parameters (shared by both motors).
    モータ・プロペラパラメータ（両モータ共通）

    Attributes:
        Lm: Inductance (H) / インダクタンス
        Rm: Resistance (Ohm) / 巻線抵抗
        Km: Torque / back-EMF constant (Nm/A) / トルク定数
        Jm: Rotor moment of inertia (kg·m²) / ローター慣性
        Cq: Propeller torque coefficient (Nm·s²/rad²) / トルク係数
        Dm: Viscous damping (Nm·s/rad) / 粘性減衰係数
    """
    Lm: float = 3.7e-4
    Rm: float = 1.2e-1
    Km: float = 3.3e-3
    Jm: float = 8.1e-6
    Cq: float = 3.0e-8
    Dm: float = 0.0

    @property
    def electrical_time_constant(self) -> float:
        """L/R (s) / 電気的時定数"""
        return self.Lm / self.Rm

    @property
    def mechanical_time_constant(self) -> float:
        """J·R/K² (s), ignoring propeller load / 機械的時定数（負荷なし）"""
        return self.Jm * self.Rm / (self.Km * self.Km)


@dataclass(frozen=True)
class AirframeParams:
    """
    Airframe parameters for the single rotational axis.
    単一回転軸の機体パラメータ

    Attributes:
        Ct: Thrust coefficient (N·s²/rad²) / 推力係数
        arm_length: Motor arm length (m) / アーム長
        Jd: Airframe moment of inertia (kg·m²) / 機体慣性モーメント
        mass: Vehicle mass (kg). Not used by any equation of motion;
              kept so the parameter set matches the vehicle datasheet.
              機体質量（運動方程式では未使用）
    """
    Ct: float = 3.5e-6
    arm_length: float = 0.09
    Jd: float = 6.0e-3
    mass: float = 0.35


@dataclass(frozen=True)
class SimConfig:
    """
    Complete configuration of one simulation run.
    1回のシミュレーション実行の全設定
    """
    motor: MotorParams = field(default_factory=MotorParams)
    airframe: AirframeParams = field(default_factory=AirframeParams)
    voltage_right: float = 7.5   # V
    voltage_left: float = 7.4    # V
    step_size: float = 1.0e-4    # s
    end_time: float = 0.5        # s

    def __post_init__(self):
        if not (math.isfinite(self.step_size) and self.step_size > 0.0):
            raise ValueError(f"step_size must be positive and finite: {self.step_size}")
        if not (math.isfinite(self.end_time) and self.end_time >= 0.0):
            raise ValueError(f"end_time must be non-negative and finite: {self.end_time}")
        for name in ("voltage_right", "voltage_left"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite: {getattr(self, name)}")
        for name in ("Lm", "Rm", "Km", "Jm"):
            if not getattr(self.motor, name) > 0.0:
                raise ValueError(f"motor.{name} must be positive")
        if not self.airframe.Jd > 0.0:
            raise ValueError("airframe.Jd must be positive")

    @property
    def num_steps(self) -> int:
        """Number of integration steps for this run / ステップ数"""
        return math.ceil(self.end_time / self.step_size)

    def replace(self, **overrides) -> "SimConfig":
        """Return a copy with some top-level fields changed / 一部を変更したコピー"""
        return _replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimConfig":
        """
        Build a config from a nested dict; missing keys take defaults.
        ネストした辞書から設定を作成（未指定キーはデフォルト値）

        Raises:
            ValueError: unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise ValueError(f"config must be a JSON object, got {type(data).__name__}")
        data = dict(data)
        motor = _build(MotorParams, data.pop("motor", {}), "motor")
        airframe = _build(AirframeParams, data.pop("airframe", {}), "airframe")
        top = _build_kwargs(cls, data, "config", skip=("motor", "airframe"))
        return cls(motor=motor, airframe=airframe, **top)


def _build_kwargs(cls, data: Dict[str, Any], section: str, skip=()) -> Dict[str, float]:
    if not isinstance(data, dict):
        raise ValueError(f"{section} must be a JSON object, got {type(data).__name__}")
    known = {f.name for f in fields(cls)} - set(skip)
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {section} keys: {', '.join(sorted(unknown))}")
    try:
        return {key: float(value) for key, value in data.items()}
    except TypeError as e:
        raise ValueError(f"Non-numeric {section} value: {e}") from e


def _build(cls, data: Dict[str, Any], section: str):
    return cls(**_build_kwargs(cls, data, section))


DEFAULT_CONFIG = SimConfig()


def load_config(path: Union[str, Path]) -> SimConfig:
    """Load a SimConfig from a JSON file / JSONファイルから設定を読み込み"""
    with open(path, "r") as f:
        return SimConfig.from_dict(json.load(f))


def save_config(path: Union[str, Path], config: SimConfig) -> None:
    """Save a SimConfig to a JSON file / 設定をJSONファイルに保存"""
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
        f.write("\n")


# =============================================================================
# Steady-state helpers
# 定常状態の計算
# =============================================================================

def equilibrium_omega(params: MotorParams, voltage: float) -> float:
    """
    Steady-state angular velocity for a constant voltage.
    一定電圧での定常角速度

    From di/dt = 0 and dω/dt = 0:
      R·Cq/K·ω² + (K + R·D/K)·ω - u = 0

    Args:
        params: Motor parameters
        voltage: Applied voltage (V)

    Returns:
        Angular velocity (rad/s), the non-negative root (0 for u <= 0)
    """
    if voltage <= 0.0:
        return 0.0
    p = params
    a = p.Rm * p.Cq / p.Km
    b = p.Km + p.Rm * p.Dm / p.Km
    if a == 0.0:
        return voltage / b
    return (-b + math.sqrt(b * b + 4.0 * a * voltage)) / (2.0 * a)


def equilibrium_current(params: MotorParams, omega: float) -> float:
    """Steady-state current at angular velocity omega (A) / 定常電流"""
    return (params.Dm * omega + params.Cq * omega * omega) / params.Km


def rate_acceleration(airframe: AirframeParams, omega_right: float, omega_left: float) -> float:
    """
    Angular acceleration of the airframe for given motor speeds (rad/s²).
    モータ回転数に対する機体角加速度

    Once both motors sit at their steady speeds this is constant, so the
    rate q grows linearly and the attitude quadratically.
    """
    thrust_right = airframe.Ct * omega_right * omega_right
    thrust_left = airframe.Ct * omega_left * omega_left
    return (thrust_right - thrust_left) * airframe.arm_length / airframe.Jd


def compute_steady_state(config: SimConfig = DEFAULT_CONFIG) -> Dict[str, float]:
    """
    Compute steady-state motor values for reference.
    参考用に定常状態を計算

    Returns:
        dict with steady-state speeds, currents, thrusts and q_dot
    """
    p = config.motor
    omega_r = equilibrium_omega(p, config.voltage_right)
    omega_l = equilibrium_omega(p, config.voltage_left)
    return {
        "omega_right": omega_r,
        "omega_left": omega_l,
        "rpm_right": omega_r * 60.0 / (2.0 * math.pi),
        "rpm_left": omega_l * 60.0 / (2.0 * math.pi),
        "current_right": equilibrium_current(p, omega_r),
        "current_left": equilibrium_current(p, omega_l),
        "thrust_right": config.airframe.Ct * omega_r * omega_r,
        "thrust_left": config.airframe.Ct * omega_l * omega_l,
        "q_dot": rate_acceleration(config.airframe, omega_r, omega_l),
    }
