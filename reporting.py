# reporting.py v1.0
# Part of Project Adaptive Descent
# - The optimizer never prints directly. It announces epoch boundaries and its
#   termination outcome to an injected reporter, so callers (and tests) decide
#   whether those events go to the console, to a recorder, or nowhere.

from abc import ABC, abstractmethod
from termcolor import cprint

from styling import C

class AbstractReporter(ABC):
    """
    Abstract Base Class for optimizer status sinks.

    Reporters are one-way: nothing they do may influence the optimization.
    """
    @abstractmethod
    def epoch(self, iteration: int, objective: float):
        """Called at every epoch boundary with the running aggregate objective."""
        pass

    @abstractmethod
    def diverged(self, objective: float):
        """Called once when the aggregate objective became NaN or infinite."""
        pass

    @abstractmethod
    def converged(self, tolerance: float, objective: float):
        """Called once when the epoch-to-epoch improvement fell below `tolerance`."""
        pass

    @abstractmethod
    def max_iterations_reached(self, max_iterations: int):
        """Called once when the iteration budget ran out."""
        pass

class ConsoleReporter(AbstractReporter):
    """Colored console output. With `verbose=False` only the outcome is printed."""
    def __init__(self, name: str = "Adam", verbose: bool = True):
        self.name = name
        self.verbose = verbose

    def epoch(self, iteration: int, objective: float):
        if self.verbose:
            cprint(f"{self.name}: iteration {iteration}, objective {objective}.", C.SUBHEADER)

    def diverged(self, objective: float):
        cprint(f"{self.name}: converged to {objective}; terminating with failure. "
               f"Try a smaller step size?", C.ERROR)

    def converged(self, tolerance: float, objective: float):
        cprint(f"{self.name}: minimized within tolerance {tolerance}; "
               f"terminating optimization.", C.SUCCESS)

    def max_iterations_reached(self, max_iterations: int):
        cprint(f"{self.name}: maximum iterations ({max_iterations}) reached; "
               f"terminating optimization.", C.WARNING)

class SilentReporter(AbstractReporter):
    """Discards every event."""
    def epoch(self, iteration, objective): pass
    def diverged(self, objective): pass
    def converged(self, tolerance, objective): pass
    def max_iterations_reached(self, max_iterations): pass

class FanOutReporter(AbstractReporter):
    """Forwards every event to each of the wrapped reporters, in order."""
    def __init__(self, *reporters: AbstractReporter):
        self.reporters = list(reporters)

    def epoch(self, iteration, objective):
        for reporter in self.reporters:
            reporter.epoch(iteration, objective)

    def diverged(self, objective):
        for reporter in self.reporters:
            reporter.diverged(objective)

    def converged(self, tolerance, objective):
        for reporter in self.reporters:
            reporter.converged(tolerance, objective)

    def max_iterations_reached(self, max_iterations):
        for reporter in self.reporters:
            reporter.max_iterations_reached(max_iterations)
