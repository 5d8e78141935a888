# main.py v2.0
# Part of Project Adaptive Descent
# v2.0: "Optimizer Bench"
# - Runs Adam or AdaMax on one of the reference objectives from the command line.
# - `--trials` repeats the run with consecutive seeds (only meaningful with
#   `--shuffle`) and prints one summary line per trial.
# - `--report-dir` writes a convergence report per trial plus a metadata.json.

import numpy as np
import argparse
import os
import json
import time
from tqdm import tqdm

from styling import C, cprint
from objectives import create_objective
from adam_optimizer import AdamOptimizer
from reporting import ConsoleReporter, FanOutReporter
from analytics import ConvergenceAnalytics

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Minimize a reference objective with Adam or AdaMax.")

    parser.add_argument('-o', '--objective', type=str, default='quadratic', choices=['quadratic', 'sgd', 'rosenbrock'],
                        help="Reference objective to minimize.")
    parser.add_argument('-d', '--dim', type=int, default=3, help="Dimension for 'quadratic' and 'rosenbrock'.")
    parser.add_argument('-lr', '--step-size', type=float, default=0.001, help="Base learning rate.")
    parser.add_argument('--beta1', type=float, default=0.9, help="First moment decay rate.")
    parser.add_argument('--beta2', type=float, default=0.999, help="Second moment / infinity norm decay rate.")
    parser.add_argument('--eps', type=float, default=1e-8, help="Denominator stabilizer.")
    parser.add_argument('-n', '--max-iterations', type=int, default=100000, help="Hard cap on update steps.")
    parser.add_argument('-t', '--tolerance', type=float, default=1e-5, help="Minimum epoch-to-epoch improvement.")
    parser.add_argument('--shuffle', action='store_true', help="Randomize the term order every epoch.")
    parser.add_argument('--adamax', action='store_true', help="Use the AdaMax update rule.")
    parser.add_argument('-s', '--seed', type=int, default=None, help="Seed for reproducibility.")
    parser.add_argument('--trials', type=int, default=1, help="Number of runs with consecutive seeds.")
    parser.add_argument('-q', '--quiet', action='store_true', help="Only print the outcome of each run.")
    parser.add_argument('--report-dir', type=str, default=None, help="Write convergence reports to this directory.")
    return parser

def run_trial(args, seed: int, reporter) -> dict:
    """Runs one optimization and returns its result record."""
    function = create_objective(args.objective, args.dim)
    iterate = function.initial_point()

    optimizer = AdamOptimizer(function, step_size=args.step_size, beta1=args.beta1, beta2=args.beta2,
                              eps=args.eps, max_iterations=args.max_iterations, tolerance=args.tolerance,
                              shuffle=args.shuffle, adamax=args.adamax, reporter=reporter, rng=seed)
    objective = optimizer.optimize(iterate)

    return {
        'seed': seed,
        'objective': float(objective),
        'termination': optimizer.termination,
        'iterations': optimizer.iterations,
        'solution': iterate.ravel().tolist(),
    }

def make_run_name(args, seed: int) -> str:
    """Run directory name. The dimension is only part of it where the objective uses it."""
    rule = "adamax" if args.adamax else "adam"
    objective = args.objective if args.objective == 'sgd' else f"{args.objective}{args.dim}"
    return f"SEED_{seed}_{objective}_{rule}_lr{args.step_size}"

def main(argv=None) -> list:
    """Main function to run the optimizer bench."""
    args = build_parser().parse_args(argv)
    if args.trials < 1:
        raise ValueError("Number of trials must be at least 1.")

    SEED = args.seed if args.seed is not None else np.random.randint(0, 1_000_000)
    rule = "adamax" if args.adamax else "adam"
    run_name = make_run_name(args, SEED)

    cprint(f"\n--- ADAPTIVE DESCENT: {rule.upper()} on '{args.objective}' ---", C.HEADER, attrs=C.BOLD_ATTR)
    cprint(f"Starting run: {run_name}", C.INFO)

    start_time = time.time()
    results = []

    try:
        for trial in tqdm(range(args.trials), desc="Optimizing", disable=args.trials == 1,
                          bar_format="{l_bar}{bar:30}{r_bar}"):
            seed = SEED + trial
            analytics = ConvergenceAnalytics(f"{run_name}_trial{trial}")
            if args.trials == 1:
                reporter = FanOutReporter(ConsoleReporter("AdaMax" if args.adamax else "Adam", verbose=not args.quiet),
                                          analytics)
            else:
                reporter = analytics

            result = run_trial(args, seed, reporter)
            analytics.final_objective = result['objective']
            results.append(result)

            color = C.ERROR if result['termination'] == AdamOptimizer.DIVERGED else C.SUCCESS
            tqdm.write(f"  Trial {trial} (seed {seed}): {result['termination']} after {result['iterations']} "
                       f"iterations, objective {result['objective']:.6e}")
            if args.trials == 1:
                cprint(f"Solution: {np.array2string(np.array(result['solution']), precision=6)}", color)

            if args.report_dir is not None:
                analytics.generate_report(os.path.join(args.report_dir, run_name, f"trial_{trial:03d}"))

    except KeyboardInterrupt:
        cprint("\nOptimization interrupted by user.", C.WARNING)

    print(f"Total optimization time: {time.time() - start_time:.2f} seconds.")

    if args.report_dir is not None:
        run_dir = os.path.join(args.report_dir, run_name)
        os.makedirs(run_dir, exist_ok=True)
        metadata = {'run_name': run_name, 'seed': SEED, 'objective': args.objective, 'dim': args.dim,
                    'rule': rule, 'step_size': args.step_size, 'beta1': args.beta1, 'beta2': args.beta2,
                    'eps': args.eps, 'max_iterations': args.max_iterations, 'tolerance': args.tolerance,
                    'shuffle': args.shuffle,
                    'trials': [{k: (str(val) if isinstance(val, float) and not np.isfinite(val) else val)
                                for k, val in r.items()} for r in results]}
        with open(os.path.join(run_dir, "metadata.json"), 'w') as f:
            json.dump(metadata, f, indent=4)
        cprint(f"Reports saved in '{run_dir}'.", C.SUCCESS)

    cprint(f"\nRun '{run_name}' complete.", C.HEADER, attrs=C.BOLD_ATTR)
    return results

if __name__ == "__main__":
    main()
