#!/usr/bin/env python3
"""
State and Snapshot Tests
状態とスナップショットのテスト
"""

import math

import pytest

from twinrotor.core import (
    RADPS2RPM,
    Side,
    MotorState,
    DroneState,
    MotorPair,
    VehicleState,
    StateRecord,
    save_state,
)


def test_save_state_copies_every_live_value():
    """Test 1: save_state freezes all motor and drone fields"""
    motors = MotorPair(
        right=MotorState(i=1.0, omega=2.0, u=7.5),
        left=MotorState(i=3.0, omega=4.0, u=7.4),
    )
    drone = DroneState(q=0.5, theta=0.25)

    save_state(motors, drone)

    for _, m in motors:
        assert (m.i_, m.omega_, m.u_) == (m.i, m.omega, m.u)
    assert (drone.q_, drone.theta_) == (0.5, 0.25)

    # Later live updates do not touch the frozen copies
    motors.right.i = 99.0
    drone.q = 99.0
    assert motors.right.i_ == 1.0
    assert drone.q_ == 0.5


def test_motor_pair_keyed_access():
    """Test 2: MotorPair indexes by Side and iterates RIGHT then LEFT"""
    right = MotorState(u=7.5)
    left = MotorState(u=7.4)
    pair = MotorPair(right=right, left=left)

    assert pair[Side.RIGHT] is right
    assert pair[Side.LEFT] is left
    assert pair.right is right and pair.left is left
    assert [side for side, _ in pair] == [Side.RIGHT, Side.LEFT]
    assert len(pair) == 2


def test_motor_pair_defaults_are_independent():
    """Test 3: default motors are separate instances"""
    pair = MotorPair()
    pair.right.i = 1.0
    assert pair.left.i == 0.0


def test_is_finite():
    """Test 4: is_finite detects nan and inf in live values"""
    state = VehicleState()
    assert state.is_finite()

    state.motors.left.omega = float("nan")
    assert not state.is_finite()

    state.motors.left.omega = 0.0
    state.drone.theta = float("inf")
    assert not state.is_finite()


def test_record_from_state_converts_speed_to_rpm():
    """Test 5: StateRecord holds rev/min and keeps the 7 fields in order"""
    state = VehicleState()
    state.motors.right.i = 20.0
    state.motors.left.i = 19.0
    state.motors.right.omega = 2.0 * math.pi   # 1 rev/s
    state.motors.left.omega = math.pi
    state.drone.q = 0.1
    state.drone.theta = 0.01

    record = StateRecord.from_state(0.25, state)

    assert record.rpm_right == pytest.approx(60.0)
    assert record.rpm_left == pytest.approx(30.0)
    assert record.as_tuple() == (0.25, 20.0, 19.0, record.rpm_right, record.rpm_left, 0.1, 0.01)
    assert RADPS2RPM == pytest.approx(60.0 / (2.0 * math.pi))
    assert state.motors.right.rpm == pytest.approx(60.0)
