# test_analytics.py v2.1
# Unit tests for the ConvergenceAnalytics reporter.

import unittest
import numpy as np
import matplotlib
import os
import json
import shutil
import tempfile
from termcolor import cprint

from analytics import ConvergenceAnalytics
from adam_optimizer import AdamOptimizer
from objectives import SeparableQuadraticFunction

class TestConvergenceAnalytics(unittest.TestCase):
    """A suite of tests for the convergence analytics reporter."""

    def setUp(self):
        cprint(f"\n--- Running test: {self._testMethodName} ---", 'yellow')
        self.analytics = ConvergenceAnalytics("unit")
        self.test_dir = tempfile.mkdtemp(prefix="test_run_dir_analytics_")

    def tearDown(self):
        if os.path.exists(self.test_dir):
            shutil.rmtree(self.test_dir)

    def test_01_accumulation_and_reporting(self):
        cprint("  -> Testing event accumulation and report generation...", 'cyan')
        self.analytics.epoch(1, 5.25)
        self.analytics.epoch(4, 1.5)
        self.analytics.epoch(7, 1.5)
        self.analytics.converged(1e-5, 1.5)

        self.assertEqual(self.analytics.num_epochs, 3)
        summary = self.analytics.summary()
        self.assertEqual(summary['termination'], 'converged')
        self.assertEqual(summary['last_iteration'], 7)
        self.assertEqual(summary['best_objective'], 1.5)
        self.assertEqual(summary['final_objective'], 1.5)

        self.analytics.generate_report(self.test_dir)

        report_dir = os.path.join(self.test_dir, 'analytics')
        history_path = os.path.join(report_dir, 'objective_history.npz')
        summary_path = os.path.join(report_dir, 'summary.json')
        plot_path = os.path.join(report_dir, 'objective_evolution.png')
        for path in (history_path, summary_path, plot_path):
            self.assertTrue(os.path.exists(path), f"Missing {path}")

        with np.load(history_path) as history:
            self.assertTrue(np.array_equal(history['iterations'], [1, 4, 7]))
            self.assertTrue(np.allclose(history['objectives'], [5.25, 1.5, 1.5]))

        with open(summary_path) as f:
            saved = json.load(f)
        self.assertEqual(saved['run_name'], 'unit')
        self.assertEqual(saved['epochs'], 3)
        cprint("Test Passed: ConvergenceAnalytics report is complete.", 'green')

    def test_02_divergent_history_is_reported(self):
        self.analytics.epoch(1, 2.0)
        self.analytics.epoch(2, float('inf'))
        self.analytics.diverged(float('inf'))

        self.assertEqual(self.analytics.summary()['best_objective'], 2.0)
        self.analytics.generate_report(self.test_dir)

        with open(os.path.join(self.test_dir, 'analytics', 'summary.json')) as f:
            saved = json.load(f)
        self.assertEqual(saved['termination'], 'diverged')
        self.assertEqual(saved['final_objective'], 'inf')

    def test_03_empty_run_writes_no_plot(self):
        self.analytics.max_iterations_reached(1)
        self.analytics.generate_report(self.test_dir)

        report_dir = os.path.join(self.test_dir, 'analytics')
        self.assertTrue(os.path.exists(os.path.join(report_dir, 'summary.json')))
        self.assertFalse(os.path.exists(os.path.join(report_dir, 'objective_evolution.png')))
        self.assertEqual(self.analytics.summary()['max_iterations'], 1)

    def test_04_records_a_real_run(self):
        function = SeparableQuadraticFunction([[1.0], [2.0]])
        optimizer = AdamOptimizer(function, step_size=0.1, max_iterations=21, tolerance=0.0,
                                  shuffle=False, reporter=self.analytics)
        optimizer.optimize(function.initial_point())

        # Two terms: boundaries at 1, 3, ..., 19.
        self.assertEqual(self.analytics.iteration_history, list(range(1, 21, 2)))
        self.assertEqual(self.analytics.termination, 'max_iterations')
        self.assertLess(self.analytics.objective_history[-1], self.analytics.objective_history[0])

    def test_05_report_style_does_not_leak(self):
        facecolor = matplotlib.rcParams['axes.facecolor']
        self.analytics.epoch(1, 2.0)
        self.analytics.epoch(2, 1.0)
        self.analytics.generate_report(self.test_dir)

        self.assertTrue(os.path.exists(os.path.join(self.test_dir, 'analytics', 'objective_evolution.png')))
        self.assertEqual(matplotlib.rcParams['axes.facecolor'], facecolor)

    def test_06_rejects_empty_name(self):
        with self.assertRaises(ValueError):
            ConvergenceAnalytics("")

if __name__ == "__main__":
    unittest.main(verbosity=2)
