"""
Curve fitting and interpolation shared by the test engines.

Provides least-squares linear regression (optionally on log10 of x),
quadratic least-squares fitting through the normal equations, and
piecewise-linear interpolation over sampled curves.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from soillab.utils.constants import FLOATING_POINT_TOLERANCE, PIVOT_TOLERANCE

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class LinearFit:
    """Least-squares straight line y = slope * x + intercept."""
    slope: float
    intercept: float
    r_squared: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


@dataclass(frozen=True)
class QuadraticFit:
    """Least-squares parabola y = a*x^2 + b*x + c."""
    a: float
    b: float
    c: float

    def evaluate(self, x: float) -> float:
        return self.a * x * x + self.b * x + self.c

    @property
    def vertex_x(self) -> Optional[float]:
        """x of the turning point, None for a straight line."""
        if abs(self.a) < FLOATING_POINT_TOLERANCE:
            return None
        return -self.b / (2 * self.a)


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> Optional[LinearFit]:
    """
    Fit a straight line by ordinary least squares.

    Args:
        xs: Independent values
        ys: Dependent values (same length as xs)

    Returns:
        LinearFit with Pearson r squared, or None when fewer than two
        points are given or all x values coincide
    """
    if len(xs) != len(ys):
        raise ValueError(f"Length mismatch: {len(xs)} x values, {len(ys)} y values")

    n = len(xs)
    if n < 2:
        return None

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_x2 = float(np.sum(x * x))
    sum_y2 = float(np.sum(y * y))

    denominator = n * sum_x2 - sum_x * sum_x
    if abs(denominator) < FLOATING_POINT_TOLERANCE:
        logger.debug("Regression rejected: x values do not vary")
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    y_spread = n * sum_y2 - sum_y * sum_y
    if abs(y_spread) < FLOATING_POINT_TOLERANCE:
        # Constant y lies exactly on the fitted horizontal line
        r_squared = 1.0
    else:
        r = (n * sum_xy - sum_x * sum_y) / math.sqrt(denominator * y_spread)
        r_squared = r * r

    return LinearFit(slope=slope, intercept=intercept, r_squared=r_squared)


def log_linear_regression(xs: Sequence[float], ys: Sequence[float]) -> Optional[LinearFit]:
    """Regress y on log10(x); the returned fit takes log10(x) as input."""
    if any(x <= 0 for x in xs):
        logger.debug("Log-linear regression rejected: non-positive x value")
        return None
    return linear_regression([math.log10(x) for x in xs], ys)


def solve_linear_system(matrix: Sequence[Sequence[float]],
                        rhs: Sequence[float]) -> Optional[np.ndarray]:
    """
    Solve A x = b by Gaussian elimination with partial pivoting.

    Returns None if any pivot is numerically zero.
    """
    augmented = np.column_stack([np.asarray(matrix, dtype=float),
                                 np.asarray(rhs, dtype=float)])
    size = augmented.shape[0]

    for i in range(size):
        pivot_row = i + int(np.argmax(np.abs(augmented[i:, i])))
        if pivot_row != i:
            augmented[[i, pivot_row]] = augmented[[pivot_row, i]]

        if abs(augmented[i, i]) < PIVOT_TOLERANCE:
            logger.debug(f"Singular system: pivot {augmented[i, i]:.3e} in column {i}")
            return None

        for k in range(i + 1, size):
            factor = augmented[k, i] / augmented[i, i]
            augmented[k, i:] -= factor * augmented[i, i:]
            augmented[k, i] = 0.0

    solution = np.zeros(size)
    for i in range(size - 1, -1, -1):
        residual = augmented[i, size] - np.dot(augmented[i, i + 1:size], solution[i + 1:])
        solution[i] = residual / augmented[i, i]

    return solution


def quadratic_fit(xs: Sequence[float], ys: Sequence[float]) -> Optional[QuadraticFit]:
    """
    Fit y = a*x^2 + b*x + c by least squares.

    Args:
        xs: Independent values
        ys: Dependent values

    Returns:
        QuadraticFit, or None for fewer than three points or a singular
        normal-equation system
    """
    if len(xs) != len(ys):
        raise ValueError(f"Length mismatch: {len(xs)} x values, {len(ys)} y values")
    if len(xs) < 3:
        return None

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)

    sum_x = np.sum(x)
    sum_x2 = np.sum(x ** 2)
    sum_x3 = np.sum(x ** 3)
    sum_x4 = np.sum(x ** 4)

    normal_matrix = [
        [sum_x4, sum_x3, sum_x2],
        [sum_x3, sum_x2, sum_x],
        [sum_x2, sum_x, float(len(x))],
    ]
    rhs = [np.sum(x ** 2 * y), np.sum(x * y), np.sum(y)]

    coefficients = solve_linear_system(normal_matrix, rhs)
    if coefficients is None:
        return None

    a, b, c = (float(v) for v in coefficients)
    return QuadraticFit(a=a, b=b, c=c)


def interpolate(points: Sequence[Point], x: float) -> Optional[float]:
    """
    Piecewise-linear interpolation of y at x.

    Points must be ordered by x. A zero-width segment returns its first y.
    Returns None outside the sampled range.
    """
    if len(points) < 2:
        return None

    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        if x1 <= x <= x2:
            if x2 - x1 == 0:
                return y1
            fraction = (x - x1) / (x2 - x1)
            return y1 + fraction * (y2 - y1)

    return None


def find_crossings(points: Sequence[Point], target: float) -> List[float]:
    """
    Find x positions where a sampled curve crosses a target y.

    A crossing is recorded for every consecutive pair whose y values lie on
    opposite sides of the target (the upper side including the target).
    """
    crossings = []
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        if (y1 >= target > y2) or (y1 < target <= y2):
            fraction = (target - y1) / (y2 - y1)
            crossings.append(x1 + fraction * (x2 - x1))
    return crossings
