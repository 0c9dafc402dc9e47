"""Small dense linear algebra and logistic regression fits."""

from __future__ import annotations

import math
from dataclasses import dataclass

Vector = list[float]
Matrix = list[list[float]]

_EPSILON = 1e-6


def _fdiv(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics for a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        sign = math.copysign(1.0, numerator) * math.copysign(1.0, denominator)
        return math.copysign(math.inf, sign)
    return numerator / denominator


def _log(x: float) -> float:
    if math.isnan(x) or x < 0:
        return math.nan
    if x == 0:
        return -math.inf
    return math.log(x)


def _dot(a, b) -> float:
    total = 0.0
    for u, v in zip(a, b):
        total += u * v
    return total


def str_matrix(m: Matrix) -> str:
    """Render a matrix, tab separated, in scientific notation with 2 digits."""
    return "".join("".join(f"{value:.2e}\t" for value in row) + "\n" for row in m)


def is_equal_d(x: float, y: float, e: float) -> bool:
    """Return True if x and y differ by less than e."""
    return math.fabs(x - y) < e


def transpose(m: Matrix) -> Matrix:
    """Return the transpose of m."""
    return [list(column) for column in zip(*m)]


def multiply(m1: Matrix, m2: Matrix) -> Matrix:
    """Return the matrix product m1 x m2."""
    if len(m1[0]) != len(m2):
        raise ValueError(
            f"cannot multiply {len(m1)}x{len(m1[0])} by {len(m2)}x{len(m2[0])}"
        )
    columns = transpose(m2)
    return [[_dot(row, column) for column in columns] for row in m1]


def lu_decomposition(m: Matrix, n: int) -> tuple[Matrix, Matrix]:
    """Doolittle LU decomposition of the leading n x n block of m."""
    lower = [[0.0] * n for _ in range(n)]
    upper = [[0.0] * n for _ in range(n)]
    for i in range(n):
        for k in range(i, n):
            upper[i][k] = m[i][k] - _dot(lower[i][:i], (upper[j][k] for j in range(i)))
        lower[i][i] = 1.0
        for k in range(i + 1, n):
            s = _dot(lower[k][:i], (upper[j][i] for j in range(i)))
            lower[k][i] = _fdiv(m[k][i] - s, upper[i][i])
    return lower, upper


def inverse(m: Matrix, n: int) -> tuple[Matrix, bool, bool]:
    """Invert m through its LU decomposition.

    Returns the inverse, whether the matrix is singular and whether the
    determinant came out as NaN.
    """
    lower, upper = lu_decomposition(m, n)
    inv = [[0.0] * n for _ in range(n)]
    det = 1.0
    for column in range(n):
        b = [1.0 if j == column else 0.0 for j in range(n)]
        y = [0.0] * n
        det *= lower[0][0]
        y[0] = b[0]
        for row in range(1, n):
            y[row] = b[row] - _dot(lower[row], y)
            det *= lower[row][row]
        x = [0.0] * n
        x[n - 1] = _fdiv(y[n - 1], upper[n - 1][n - 1])
        det *= upper[n - 1][n - 1]
        for row in range(n - 2, -1, -1):
            s = _dot(upper[row][row + 1:], x[row + 1:])
            x[row] = _fdiv(y[row] - s, upper[row][row])
            det *= upper[row][row]
        for j, value in enumerate(x):
            inv[j][column] = value
    singular = det == 0
    nan = not singular and math.isnan(det)
    return inv, singular, nan


def sigmoid(x: float) -> float:
    """Logistic function."""
    try:
        return 1.0 / (1.0 + math.exp(-x))
    except OverflowError:
        return 0.0


def linear_predictor(model: Vector, data: Vector) -> float:
    """Dot product of model weights and data."""
    return _dot(model, data)


def predict(model: Vector, data: Vector) -> float:
    """Probability predicted by a logistic model."""
    return sigmoid(linear_predictor(model, data))


@dataclass(frozen=True)
class GlmResult:
    """Outcome of a logistic regression fit."""

    weights: Vector
    singular: bool
    nan: bool
    error: float
    iterations: int


def glm_newton_raphson(x: Matrix, y: Vector, gamma: float, max_iters: int) -> GlmResult:
    """Fit a logistic model with damped Newton-Raphson steps."""
    nrows = len(x)
    at = transpose(x)
    weights = [_fdiv(1.0, max([-10000000000.0, *column])) for column in at]
    prev_error = 1e18
    error_out = 0.0
    iterations = 0

    while True:
        error = 0.0
        b_proxy = []
        a_minus_y = []
        for row, target in zip(x, y):
            alpha = sigmoid(_dot(row, weights))
            error += (target - alpha) * (target - alpha)
            b_proxy.append(alpha * (1.0 - alpha))
            a_minus_y.append([alpha - target])
        error /= nrows
        error_out = error
        if math.fabs(error - prev_error) < _EPSILON:
            break
        prev_error = error

        atb = [[a * b for a, b in zip(at_row, b_proxy)] for at_row in at]
        to_invert = multiply(atb, x)
        h_inv, singular, nan = inverse(to_invert, len(to_invert))
        if singular or nan:
            return GlmResult(weights, False, False, error_out, iterations)

        step = multiply(h_inv, multiply(at, a_minus_y))
        weights = [w - gamma * s[0] for w, s in zip(weights, step)]

        iterations += 1
        if iterations >= max_iters:
            break
        error_out = prev_error

    return GlmResult(weights, False, False, error_out, iterations)


def glm_irls(x: Matrix, y: Vector, max_iters: int) -> GlmResult:
    """Fit a logistic model by iteratively reweighted least squares."""
    nrows = len(x)
    ncols = len(x[0])
    weights = [1.0] * ncols
    mu = [(target + 0.5) / 2 for target in y]
    eta = [_log(_fdiv(m, 1 - m)) for m in mu]
    prev_error = 1e18
    error_out = math.nan
    singular = nan = False
    iterations = 0

    while True:
        good_x: Matrix = []
        z: Vector = []
        s: Vector = []
        error = 0.0
        for row, target, m, e in zip(x, y, mu, eta):
            g = m * (1.0 - m)
            if g > 1e-305:
                good_x.append(row)
                z.append(e + (target - m) / (g + 1e-305))
                s.append(g)
            error += (target - m) * (target - m)
        if not good_x:
            break

        error /= nrows
        error_out = error
        if math.fabs(error - prev_error) < _EPSILON:
            break
        prev_error = error

        x_t = transpose(good_x)
        s_x = [[weight * value for value in row] for weight, row in zip(s, good_x)]
        hessian = multiply(x_t, s_x)
        h_inv, singular, nan = inverse(hessian, len(hessian))
        if singular or nan:
            error_out = prev_error
            break

        s_z = [[weight * value] for weight, value in zip(s, z)]
        w = multiply(h_inv, multiply(x_t, s_z))

        iterations += 1
        if iterations >= max_iters:
            break
        error_out = prev_error

        weights = [row[0] for row in w]
        eta = [_dot(row, weights) for row in x]
        mu = [sigmoid(e) for e in eta]

    return GlmResult(weights, singular, nan, error_out, iterations)