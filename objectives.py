# objectives.py v1.0
# Part of Project Adaptive Descent
# - Defines the capability every objective handed to AdamOptimizer must offer.
# - Contains a few reference decomposable functions with known minima, used by
#   the command line and the test-suite.

from typing import Protocol, runtime_checkable
import numpy as np

@runtime_checkable
class DecomposableFunction(Protocol):
    """
    An objective of the form f(x) = sum_i f_i(x), i in [0, num_functions()).

    No base class is needed: any object with these three methods qualifies.
    """
    def num_functions(self) -> int:
        """Number of additive terms (at least 1)."""
        ...

    def evaluate(self, coordinates: np.ndarray, i: int) -> float:
        """Value of term `i` at `coordinates`."""
        ...

    def gradient(self, coordinates: np.ndarray, i: int, gradient: np.ndarray) -> None:
        """Writes the gradient of term `i` into `gradient` (same shape as `coordinates`)."""
        ...

class SeparableQuadraticFunction:
    """
    f(x) = sum_j (x_j - target_j)^2.

    With `per_coordinate=True` every coordinate is its own term, so a single term's
    gradient touches one coordinate only. Otherwise the whole sum is one term.
    """
    def __init__(self, target, per_coordinate: bool = True):
        self.target = np.array(target, dtype=np.float64)
        if self.target.size == 0:
            raise ValueError("Target must have at least one coordinate.")
        self.per_coordinate = per_coordinate

    def num_functions(self) -> int:
        return self.target.size if self.per_coordinate else 1

    def evaluate(self, coordinates: np.ndarray, i: int) -> float:
        if self.per_coordinate:
            return float((coordinates.flat[i] - self.target.flat[i]) ** 2)
        return float(np.sum((coordinates - self.target) ** 2))

    def gradient(self, coordinates: np.ndarray, i: int, gradient: np.ndarray) -> None:
        if self.per_coordinate:
            gradient.fill(0.0)
            gradient.flat[i] = 2.0 * (coordinates.flat[i] - self.target.flat[i])
        else:
            gradient[...] = 2.0 * (coordinates - self.target)

    def initial_point(self) -> np.ndarray:
        return np.zeros_like(self.target)

class SGDTestFunction:
    """
    A three-term function on a 3x1 column with minimum -1 at the origin:
        f_0 = -exp(-|x_0|),  f_1 = x_1^2,  f_2 = x_2^4 + 3 x_2^2
    """
    def num_functions(self) -> int:
        return 3

    def evaluate(self, coordinates: np.ndarray, i: int) -> float:
        if i == 0:
            return float(-np.exp(-np.abs(coordinates.flat[0])))
        elif i == 1:
            return float(coordinates.flat[1] ** 2)
        elif i == 2:
            x2 = coordinates.flat[2]
            return float(x2 ** 4 + 3 * x2 ** 2)
        raise IndexError(f"SGDTestFunction has no term {i}.")

    def gradient(self, coordinates: np.ndarray, i: int, gradient: np.ndarray) -> None:
        gradient.fill(0.0)
        if i == 0:
            x0 = coordinates.flat[0]
            gradient.flat[0] = np.exp(-x0) if x0 >= 0 else -np.exp(x0)
        elif i == 1:
            gradient.flat[1] = 2 * coordinates.flat[1]
        elif i == 2:
            x2 = coordinates.flat[2]
            gradient.flat[2] = 4 * x2 ** 3 + 6 * x2
        else:
            raise IndexError(f"SGDTestFunction has no term {i}.")

    def initial_point(self) -> np.ndarray:
        return np.array([[6.0], [-45.6], [6.2]])

class GeneralizedRosenbrockFunction:
    """
    The n-dimensional Rosenbrock function split into n-1 terms:
        f_i = 100 (x_{i+1} - x_i^2)^2 + (1 - x_i)^2
    Minimum 0 at x = (1, ..., 1).
    """
    def __init__(self, n: int):
        if n < 2:
            raise ValueError("Rosenbrock needs at least 2 dimensions.")
        self.n = n

    def num_functions(self) -> int:
        return self.n - 1

    def evaluate(self, coordinates: np.ndarray, i: int) -> float:
        x_i, x_next = coordinates.flat[i], coordinates.flat[i + 1]
        return float(100 * (x_next - x_i ** 2) ** 2 + (1 - x_i) ** 2)

    def gradient(self, coordinates: np.ndarray, i: int, gradient: np.ndarray) -> None:
        x_i, x_next = coordinates.flat[i], coordinates.flat[i + 1]
        gradient.fill(0.0)
        gradient.flat[i] = -400 * x_i * (x_next - x_i ** 2) - 2 * (1 - x_i)
        gradient.flat[i + 1] = 200 * (x_next - x_i ** 2)

    def initial_point(self) -> np.ndarray:
        point = np.ones((self.n, 1))
        point[::2] = -1.2
        return point

def total_objective(function: DecomposableFunction, coordinates: np.ndarray) -> float:
    """Sum of all terms of `function` at `coordinates`."""
    return sum(function.evaluate(coordinates, i) for i in range(function.num_functions()))

def create_objective(name: str, dim: int = 3):
    """Factory for the reference objectives by command-line name."""
    if name == 'quadratic':
        return SeparableQuadraticFunction(np.arange(1, dim + 1, dtype=np.float64).reshape(-1, 1))
    elif name == 'sgd':
        return SGDTestFunction()
    elif name == 'rosenbrock':
        return GeneralizedRosenbrockFunction(dim)
    else:
        raise ValueError(f"Unknown objective: '{name}'")
