#!/usr/bin/env python3
"""
RK4 Integrator Tests
RK4積分器テスト

Checks the contract of rk4(): fixed points, exactness for polynomial
solutions, 4th-order convergence, and constant auxiliary inputs.
"""

import math

import numpy as np
import pytest

from twinrotor.core import (
    rk4,
    MotorModel,
    MotorParams,
    CurrentInputs,
    AttitudeInputs,
    theta_dot,
)


# =============================================================================
# Fixed points
# =============================================================================

@pytest.mark.parametrize("h", [1e-4, 1e-2, 1.0, 10.0])
def test_zero_derivative_fixed_point(h):
    """Test 1: i=0, omega=0, u=0 gives di/dt=0, so rk4 leaves i unchanged"""
    model = MotorModel(MotorParams())
    assert model.i_dot(0.0, 0.0, CurrentInputs(omega=0.0, u=0.0)) == 0.0
    assert rk4(model.i_dot, 0.0, 0.0, h, CurrentInputs(omega=0.0, u=0.0)) == 0.0


def test_balanced_voltage_fixed_point():
    """Test 2: u = R·i + K·ω balances the electrical equation"""
    p = MotorParams()
    model = MotorModel(p)
    i, omega = 2.0, 150.0
    u = p.Rm * i + p.Km * omega

    i_next = rk4(model.i_dot, i, 0.0, 1e-3, CurrentInputs(omega=omega, u=u))
    assert i_next == pytest.approx(i, abs=1e-12)


def test_zero_step_is_identity():
    """Test 3: h=0 returns x unchanged"""
    model = MotorModel(MotorParams())
    x = 3.25
    assert rk4(model.i_dot, x, 0.4, 0.0, CurrentInputs(omega=100.0, u=7.5)) == x


# =============================================================================
# Exactness and order
# =============================================================================

def test_linear_exactness():
    """Test 4: theta_dot = q with q frozen gives theta + q·h"""
    theta0, q, h = 0.1, 0.3, 0.01
    theta1 = rk4(theta_dot, theta0, 0.0, h, AttitudeInputs(q=q))
    assert theta1 == pytest.approx(theta0 + q * h, abs=1e-15)


def test_time_dependent_quadratic_exact():
    """Test 5: dx/dt = t integrates exactly (Simpson weights)"""
    def f(x, t, aux):
        return t

    t0, h = 0.2, 0.05
    x1 = rk4(f, 0.0, t0, h, ())
    expected = 0.5 * ((t0 + h) ** 2 - t0 ** 2)
    assert x1 == pytest.approx(expected, abs=1e-15)


def test_fourth_order_convergence():
    """Test 6: global error of dx/dt=-x shrinks ~16x when h halves"""
    def decay(x, t, aux):
        return -x

    def solve(h):
        n = int(round(1.0 / h))
        x, t = 1.0, 0.0
        for _ in range(n):
            x = rk4(decay, x, t, h, ())
            t += h
        return abs(x - math.exp(-1.0))

    e1 = solve(0.1)
    e2 = solve(0.05)
    print(f"\nerror h=0.1: {e1:.3e}, h=0.05: {e2:.3e}, ratio={e1 / e2:.2f}")
    assert e1 < 1e-5
    assert 14.0 < e1 / e2 < 18.0


def test_auxiliary_values_constant_across_stages():
    """Test 7: all four stages receive the same aux object and stage times"""
    seen = []

    def f(x, t, aux):
        seen.append((t, aux))
        return 1.0

    aux = (1.0, 2.0)
    rk4(f, 0.0, 1.0, 0.1, aux)

    assert len(seen) == 4
    assert all(a is aux for _, a in seen)
    assert np.allclose([t for t, _ in seen], [1.0, 1.05, 1.05, 1.1])
