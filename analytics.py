# analytics.py v2.1
# Part of Project Adaptive Descent
# v2.1: The Agg backend and the dark plot style now live here, the style only
#   for the duration of one plot.
# v2.0: "Convergence Analytics"
# - Now a reporter: it listens to the optimizer's epoch boundaries and
#   termination events instead of analyzing simulation frames.
# - The report holds the objective history, a JSON summary of the run and
#   a plot of the objective against the iteration counter.

import numpy as np
import matplotlib
matplotlib.use('Agg') # Reports are written to disk, never shown
import matplotlib.pyplot as plt
import json
import os

from styling import C, PLOT_STYLE, FONT_SIZE_LABEL, FONT_SIZE_TITLE, COLOR_OBJECTIVE, COLOR_TERMINATION
from termcolor import cprint

from reporting import AbstractReporter

class ConvergenceAnalytics(AbstractReporter):
    """
    Records the epoch-by-epoch objective of one optimizer run.
    """
    def __init__(self, run_name: str = "run"):
        if not run_name:
            raise ValueError("Run name must not be empty.")
        self.run_name = run_name
        self.iteration_history = []
        self.objective_history = []
        self.termination = None
        self.final_objective = None
        self.tolerance = None
        self.max_iterations = None

    def epoch(self, iteration: int, objective: float):
        self.iteration_history.append(iteration)
        self.objective_history.append(float(objective))

    def diverged(self, objective: float):
        self.termination = "diverged"
        self.final_objective = float(objective)

    def converged(self, tolerance: float, objective: float):
        self.termination = "converged"
        self.tolerance = tolerance
        self.final_objective = float(objective)

    def max_iterations_reached(self, max_iterations: int):
        # The optimizer recomputes the objective afterwards; callers may set
        # `final_objective` themselves once they have it.
        self.termination = "max_iterations"
        self.max_iterations = max_iterations

    @property
    def num_epochs(self) -> int:
        return len(self.objective_history)

    def summary(self) -> dict:
        finite = [obj for obj in self.objective_history if np.isfinite(obj)]
        return {
            'run_name': self.run_name,
            'termination': self.termination,
            'epochs': self.num_epochs,
            'last_iteration': self.iteration_history[-1] if self.iteration_history else 0,
            'final_objective': self.final_objective,
            'best_objective': min(finite) if finite else None,
            'tolerance': self.tolerance,
            'max_iterations': self.max_iterations,
        }

    def generate_report(self, run_directory: str):
        """Generates and saves the history, the summary and the plot."""
        cprint("\n--- Generating Convergence Report ---", C.WARNING)
        report_dir = os.path.join(run_directory, 'analytics')
        os.makedirs(report_dir, exist_ok=True)

        iterations = np.array(self.iteration_history, dtype=np.int64)
        objectives = np.array(self.objective_history, dtype=np.float64)

        history_path = os.path.join(report_dir, 'objective_history.npz')
        np.savez_compressed(history_path, iterations=iterations, objectives=objectives)
        cprint(f"  -> Objective history saved to '{history_path}'", C.SUBHEADER)

        summary_path = os.path.join(report_dir, 'summary.json')
        with open(summary_path, 'w') as f:
            # JSON has no NaN/Infinity; non-finite objectives are written as strings.
            summary = {k: (str(val) if isinstance(val, float) and not np.isfinite(val) else val)
                       for k, val in self.summary().items()}
            json.dump(summary, f, indent=4)
        cprint(f"  -> Run summary saved to '{summary_path}'", C.SUBHEADER)

        if self.objective_history:
            with plt.style.context(PLOT_STYLE):
                fig, ax = plt.subplots(figsize=(14, 7))
                finite = np.isfinite(objectives)

                ax.set_xlabel("Iteration", fontsize=FONT_SIZE_LABEL)
                ax.set_ylabel("Epoch Objective", fontsize=FONT_SIZE_LABEL, color=COLOR_OBJECTIVE)
                ax.plot(iterations[finite], objectives[finite], color=COLOR_OBJECTIVE, marker='.', label='Objective')
                if finite.any() and np.all(objectives[finite] > 0):
                    ax.set_yscale('log')
                if self.termination is not None:
                    ax.axvline(iterations[-1], color=COLOR_TERMINATION, linestyle='--', label=f"Stop: {self.termination}")
                ax.tick_params(axis='y', labelcolor=COLOR_OBJECTIVE)
                ax.grid(True, linestyle='--', alpha=0.3)
                ax.legend(loc='best')

                fig.suptitle(f"Objective Evolution ({self.run_name})", fontsize=FONT_SIZE_TITLE, weight='bold')
                fig.tight_layout(rect=[0, 0.03, 1, 0.95])

                plot_path = os.path.join(report_dir, 'objective_evolution.png')
                fig.savefig(plot_path, dpi=150)
                plt.close(fig)
            cprint(f"  -> Objective plot saved to '{plot_path}'", C.SUBHEADER)

        cprint("--- Report Generation Complete ---", C.WARNING)
