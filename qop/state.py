"""
state.py

Helpers for quantum states held as interleaved (real, imaginary) amplitude
arrays: normalization, easing curves, interpolation between two states for
animation, and a ket-formatted listing for debugging.
"""

import math

import numpy as np

from qop.config import DEFAULT_CONFIG


def normalized(amplitudes):
    """
    Scale amplitudes so that the sum of squared magnitudes is 1.
    A state that is already normalized is returned as is.
    """
    amplitudes = np.asarray(amplitudes, dtype=float)
    sum_of_squares = float(np.dot(amplitudes, amplitudes))
    if sum_of_squares == 0:
        raise ValueError("Cannot normalize a zero state")
    if sum_of_squares != 1:
        amplitudes = amplitudes / math.sqrt(sum_of_squares)
    return amplitudes


def ease_linear(t):
    return t


def ease_quadratic_in_out(t):
    return 2 * t * t if t <= 0.5 else 2 * t * (2 - t) - 1


def ease_sinusoidal_in_out(t):
    return 0.5 * (1 - math.cos(math.pi * t))


def _polar(amplitudes):
    pairs = np.asarray(amplitudes, dtype=float).reshape(-1, 2)
    radius_squared = pairs[:, 0] ** 2 + pairs[:, 1] ** 2
    return np.arctan2(pairs[:, 1], pairs[:, 0]), radius_squared


def tween(amplitudes1, amplitudes2, ease=ease_sinusoidal_in_out,
          epsilon=DEFAULT_CONFIG.tween_epsilon):
    """
    Return a function of t in [0, 1] that interpolates between two states.

    Each amplitude moves along the shorter arc between its endpoint phases,
    with a linearly interpolated magnitude. An endpoint whose squared
    magnitude is below ``epsilon`` has no meaningful phase and takes the
    other endpoint's. At t <= 0 and t >= 1 the endpoint arrays themselves
    are returned.

    Both states must have the same number of qubits; expand the smaller
    one first.
    """
    if len(amplitudes1) != len(amplitudes2):
        raise ValueError(
            f"Cannot tween states of different sizes "
            f"({len(amplitudes1)} and {len(amplitudes2)} values)")

    angle1, radius_squared1 = _polar(amplitudes1)
    angle2, radius_squared2 = _polar(amplitudes2)

    # unwrap so the phase never travels more than half a turn
    difference = angle2 - angle1
    angle1 = np.where(difference > math.pi, angle1 + 2 * math.pi, angle1)
    angle2 = np.where(-difference > math.pi, angle2 + 2 * math.pi, angle2)

    small1 = radius_squared1 < epsilon
    small2 = (radius_squared2 < epsilon) & ~small1
    angle1 = np.where(small1, angle2, angle1)
    angle2 = np.where(small2, angle1, angle2)

    radius1 = np.sqrt(radius_squared1)
    radius2 = np.sqrt(radius_squared2)

    def at(t):
        if t <= 0:
            return amplitudes1
        if t >= 1:
            return amplitudes2

        t = ease(t)
        angle = (1 - t) * angle1 + t * angle2
        radius = (1 - t) * radius1 + t * radius2

        amplitudes = np.empty(2 * angle.shape[0])
        amplitudes[0::2] = radius * np.cos(angle)
        amplitudes[1::2] = radius * np.sin(angle)
        return amplitudes

    return at


def format_qubit_state(amplitudes, tol=DEFAULT_CONFIG.display_tolerance) -> str:
    """
    Nicely format a state of interleaved amplitudes as a sum of kets,
    omitting amplitudes smaller than ``tol``.
    """
    pairs = np.asarray(amplitudes, dtype=float).reshape(-1, 2)
    n = int(math.log2(pairs.shape[0]))

    def fmt(re, im):
        if abs(im) < tol:
            return f"{re:.3f}"
        if abs(re) < tol:
            return f"{im:.3f}j"
        sign = '+' if im >= 0 else '-'
        return f"({re:.3f}{sign}{abs(im):.3f}j)"

    terms = []
    for k, (re, im) in enumerate(pairs):
        if math.hypot(re, im) < tol:
            continue
        bits = format(k, f"0{n}b") if n else ""
        terms.append(f"{fmt(re, im)}|{bits}⟩")
    return " + ".join(terms) if terms else "0"
