"""
Kernel math for resampling.

Pure, stateless numeric helpers. All functions accept scalars or NumPy
arrays and broadcast.
"""

from typing import Union

import numpy as np

from core.constants import TransformConstants

ArrayLike = Union[float, np.ndarray]


def round_half_up(value: ArrayLike) -> ArrayLike:
    """Round to nearest integer, ties toward +infinity (Python's round() ties to even)."""
    result = np.floor(np.asarray(value, dtype=np.float64) + 0.5)
    return int(result) if result.ndim == 0 else result


def lanczos(x: ArrayLike, radius: int = TransformConstants.LANCZOS_RADIUS) -> ArrayLike:
    """
    Lanczos windowed-sinc weight.

    L(0) = 1, L(x) = 0 for x >= radius, otherwise
    radius * sin(pi x) * sin(pi x / radius) / (pi x)^2.
    """
    x = np.asarray(x, dtype=np.float64)
    xpi = x * np.pi
    with np.errstate(divide="ignore", invalid="ignore"):
        weight = radius * np.sin(xpi) * np.sin(xpi / radius) / (xpi * xpi)
    weight = np.where(x == 0, 1.0, weight)
    weight = np.where(x >= radius, 0.0, weight)
    return float(weight) if weight.ndim == 0 else weight


def distance_weight(
    dx: ArrayLike, dy: ArrayLike, radius: int = TransformConstants.LANCZOS_RADIUS
) -> ArrayLike:
    """
    Map a 2-D offset to a kernel weight.

    The Euclidean distance is normalized by the radius before it is fed to
    the kernel; non-positive weights (the negative lobes) are dropped to 0.
    """
    distance = np.sqrt(np.square(dx) + np.square(dy))
    weight = lanczos(distance / radius, radius)
    return np.where(np.asarray(weight) > 0, weight, 0.0)
