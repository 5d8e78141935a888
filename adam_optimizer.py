# adam_optimizer.py v2.0
# Part of Project Adaptive Descent
# Author: Ben Carter
# v2.0: "Decomposable Descent"
# - The optimizer no longer performs a single `update(params, grads)` step for a
#   caller-driven loop. It now owns the loop: it sweeps the terms of a
#   decomposable objective one at a time, epoch after epoch, until the objective
#   stops improving, blows up, or the iteration budget is spent.
# - Adds the AdaMax variant (infinity-norm second moment).
# - Moment buffers are now local to one `optimize` call.
# - Status output goes through an injected reporter instead of direct prints.

from typing import Optional, Union
import numpy as np

from objectives import total_objective
from reporting import AbstractReporter, ConsoleReporter

class AdamOptimizer:
    """
    Adam (Adaptive Moment Estimation) and AdaMax for decomposable objectives.

    The objective is any object offering `num_functions()`, `evaluate(x, i)` and
    `gradient(x, i, out)` (see `objectives.DecomposableFunction`). Each step takes
    the gradient of a single term, folds it into an exponentially decaying
    average of past gradients (1st moment, `m`) and either of past squared
    gradients (2nd moment, `v`, Adam) or of past gradient magnitudes (weighted
    infinity norm, `u`, AdaMax), then moves the iterate coordinate-wise.

    One epoch visits every term exactly once, in index order or, when shuffling,
    in a fresh random order per epoch. The optimization stops at an epoch
    boundary when the summed objective is no longer finite (divergence) or has
    changed by less than `tolerance` since the previous boundary (convergence),
    and otherwise after `max_iterations` steps.

    Reference: Kingma, D. P., & Ba, J. (2014). Adam: A Method for Stochastic Optimization.
    """
    DIVERGED = "diverged"
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"

    def __init__(self, function, step_size: float = 0.001, beta1: float = 0.9, beta2: float = 0.999,
                 eps: float = 1e-8, max_iterations: int = 100000, tolerance: float = 1e-5,
                 shuffle: bool = True, adamax: bool = False,
                 reporter: Optional[AbstractReporter] = None,
                 rng: Optional[Union[np.random.Generator, int]] = None):
        """
        Initializes the optimizer with its hyperparameters.

        Args:
            function: The decomposable objective to minimize.
            step_size (float): The base learning rate.
            beta1 (float): The exponential decay rate for the first moment estimates.
            beta2 (float): The exponential decay rate for the second moment (or infinity norm) estimates.
            eps (float): A small constant for numerical stability (to prevent division by zero).
            max_iterations (int): Hard cap on the step counter.
            tolerance (float): Minimum epoch-to-epoch change of the objective to keep going.
            shuffle (bool): Visit the terms in a new random order each epoch.
            adamax (bool): Use the AdaMax update rule instead of Adam.
            reporter (AbstractReporter): Receives status events. Defaults to a ConsoleReporter.
            rng: A numpy Generator or an integer seed, used only when shuffling.
        """
        if not 0.0 < step_size: raise ValueError("Step size must be positive.")
        if not 0.0 <= beta1 < 1.0: raise ValueError("Beta1 must be in [0, 1).")
        if not 0.0 <= beta2 < 1.0: raise ValueError("Beta2 must be in [0, 1).")
        if not 0.0 < eps: raise ValueError("Epsilon must be positive.")
        if not 1 <= max_iterations: raise ValueError("Max iterations must be at least 1.")
        if not 0.0 <= tolerance: raise ValueError("Tolerance must be non-negative.")

        self.function = function
        self.step_size = step_size
        self.beta1 = beta1
        self.beta2 = beta2
        self.eps = eps
        self.max_iterations = int(max_iterations)
        self.tolerance = tolerance
        self.shuffle = shuffle
        self.adamax = adamax
        self.reporter = reporter if reporter is not None else ConsoleReporter("AdaMax" if adamax else "Adam")
        self.rng = np.random.default_rng(rng)

        # Outcome of the most recent optimize() call.
        self.termination = None
        self.iterations = 0

    def _finish(self, termination: str, iteration: int, objective: float) -> float:
        self.termination = termination
        self.iterations = iteration
        return objective

    def optimize(self, iterate: np.ndarray) -> float:
        """
        Minimizes the objective, updating `iterate` in place.

        Args:
            iterate (np.ndarray): The starting point; holds the result afterwards.

        Returns:
            float: The final objective. NaN or infinite if the optimizer diverged;
                   check `self.termination` to tell the outcomes apart.
        """
        num_functions = self.function.num_functions()

        visitation_order = None
        if self.shuffle:
            visitation_order = self.rng.permutation(num_functions)

        current_function = 0
        overall_objective = total_objective(self.function, iterate)
        last_objective = np.finfo(np.float64).max

        gradient = np.zeros_like(iterate, dtype=np.float64)
        m = np.zeros_like(iterate, dtype=np.float64)  # 1st moment
        if self.adamax:
            u = np.zeros_like(iterate, dtype=np.float64)  # Weighted infinity norm
        else:
            v = np.zeros_like(iterate, dtype=np.float64)  # 2nd raw moment

        # A diverging iterate overflows on purpose; the NaN/Inf check below handles it.
        with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
            for i in range(1, self.max_iterations):
                # Is this iteration the start of an epoch?
                if current_function % num_functions == 0:
                    self.reporter.epoch(i, overall_objective)

                    if not np.isfinite(overall_objective):
                        self.reporter.diverged(overall_objective)
                        return self._finish(self.DIVERGED, i, overall_objective)

                    if abs(last_objective - overall_objective) < self.tolerance:
                        self.reporter.converged(self.tolerance, overall_objective)
                        return self._finish(self.CONVERGED, i, overall_objective)

                    last_objective = overall_objective
                    overall_objective = 0.0
                    current_function = 0

                    if self.shuffle:
                        visitation_order = self.rng.permutation(visitation_order)

                index = int(visitation_order[current_function]) if self.shuffle else current_function
                self.function.gradient(iterate, index, gradient)

                m *= self.beta1
                m += (1 - self.beta1) * gradient

                if self.adamax:
                    u *= self.beta2
                    np.maximum(u, np.abs(gradient), out=u)
                else:
                    v *= self.beta2
                    v += (1 - self.beta2) * (gradient * gradient)

                bias_correction1 = 1.0 - self.beta1 ** i
                bias_correction2 = 1.0 - self.beta2 ** i

                if self.adamax:
                    if bias_correction1 != 0.0:
                        iterate -= self.step_size / bias_correction1 * m / (u + self.eps)
                else:
                    # m / (sqrt(v) + eps) approximates the exact
                    # m / (sqrt(v) + sqrt(bias_correction2) * eps).
                    iterate -= (self.step_size * np.sqrt(bias_correction2) / bias_correction1) * \
                               m / (np.sqrt(v) + self.eps)

                # Evaluated after the update, at the term just used.
                overall_objective += self.function.evaluate(iterate, index)
                current_function += 1

            self.reporter.max_iterations_reached(self.max_iterations)
            overall_objective = total_objective(self.function, iterate)

        return self._finish(self.MAX_ITERATIONS, self.max_iterations, overall_objective)
