"""
Batch Evaluation of CVRP Strategies
===================================

Runs every requested strategy over a set of instance files, verifies each
returned plan independently and collects the results into one table.

Usage:
    cvrp-evaluate instances/*.json --strategies savings iterative --output results/summary.csv

    # Or programmatically
    from cvrp_heuristics.evaluate_solvers import evaluate_solvers
    table = evaluate_solvers(["a.json", "b.json"], strategies=["savings"])
"""

import os
import sys
import time
import argparse
import logging
from datetime import datetime

import pandas as pd
from tqdm import tqdm

from cvrp_heuristics.cvrp_main import STRATEGIES, run_strategy
from cvrp_heuristics.problem.constraints import RouteValidator
from cvrp_heuristics.problem.cvrp_problem import CVRPInputError, load_problem
from cvrp_heuristics.utils.config import DEFAULT_CONFIG_PATH, load_config

logger = logging.getLogger(__name__)

COLUMNS = ["instance", "strategy", "status", "total_distance", "num_routes",
           "max_total_distance", "gap", "violations", "iterations", "timeout", "runtime"]

def setup_logging():
    """
    Configure application logging.

    Sets up both file and console logging with timestamps. Log files are
    stored in the 'log' directory with filenames that include the current
    timestamp.
    """
    os.makedirs("log", exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(f"log/evaluate_solvers_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"),
            logging.StreamHandler()
        ]
    )

def evaluate_instance(problem, strategy, config, seed=None):
    """
    Solve one instance with one strategy and score the result.

    Returns:
        dict: Row with status ("solved", "no_solution"), distance, gap, number
              of verification violations and the solver's iteration count
    """
    start_time = time.time()
    results = run_strategy(problem, strategy=strategy, config=config, seed=seed)
    runtime = time.time() - start_time
    solution = results["best_solution"]
    stats = results["stats"]

    row = {
        "strategy": strategy,
        "max_total_distance": problem.max_total_distance,
        "runtime": runtime,
        "iterations": stats.get("iterations"),
        "timeout": stats.get("timeout", False),
    }

    if solution is None:
        row.update({"status": "no_solution", "total_distance": None, "num_routes": 0,
                    "gap": None, "violations": 0})
        return row

    row.update({
        "status": "solved",
        "total_distance": solution.total_distance(),
        "num_routes": len(solution.routes),
        "gap": RouteValidator.baseline_gap(problem, solution),
        "violations": len(RouteValidator.verify_solution(problem, solution)),
    })
    return row

def evaluate_solvers(instance_paths, strategies=None, config=None, seed=None):
    """
    Evaluate strategies over instance files.

    Instances that fail validation, cannot be parsed as JSON or cannot be read
    are recorded with status "invalid_instance" instead of aborting the batch.

    Args:
        instance_paths (list): Paths to instance JSON files
        strategies (list, optional): Strategy names (default: all strategies)
        config (dict, optional): Configuration dictionary (default: packaged config)
        seed (int, optional): Random seed for stochastic strategies

    Returns:
        pandas.DataFrame: One row per (instance, strategy)
    """
    config = config if config is not None else load_config()
    strategies = strategies or sorted(STRATEGIES)
    rows = []

    for path in tqdm(instance_paths, desc="Evaluating instances", unit="instance"):
        name = os.path.basename(path)
        try:
            problem = load_problem(path)
        except (CVRPInputError, ValueError, OSError) as e:
            logger.warning(f"Skipping {name}: {e}")
            for strategy in strategies:
                rows.append({"instance": name, "strategy": strategy, "status": "invalid_instance"})
            continue

        for strategy in strategies:
            row = evaluate_instance(problem, strategy, config, seed=seed)
            row["instance"] = name
            rows.append(row)
            logger.info(f"{name} / {strategy}: {row['status']} (distance {row['total_distance']})")

    return pd.DataFrame(rows, columns=COLUMNS)

def main(argv=None):
    parser = argparse.ArgumentParser(description='Evaluate CVRP strategies over instance files')
    parser.add_argument('instances', nargs='+', help='Instance JSON files')
    parser.add_argument('--strategies', nargs='+', choices=sorted(STRATEGIES), default=None,
                        help='Strategies to evaluate (default: all)')
    parser.add_argument('--config', default=DEFAULT_CONFIG_PATH, help='Path to the solver configuration file')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for stochastic strategies')
    parser.add_argument('--output', default=None, help='CSV output path (default: timestamped file in results/)')

    args = parser.parse_args(argv)

    setup_logging()

    config = load_config(args.config)
    table = evaluate_solvers(args.instances, strategies=args.strategies, config=config, seed=args.seed)

    output = args.output or f"results/evaluation_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    directory = os.path.dirname(output)
    if directory:
        os.makedirs(directory, exist_ok=True)
    table.to_csv(output, index=False)

    solved = table[table["status"] == "solved"]
    logger.info(f"Evaluation written to {output}")
    logger.info(f"Solved {len(solved)} of {len(table)} runs")
    if not solved.empty:
        summary = solved.groupby("strategy")[["total_distance", "gap", "runtime"]].mean()
        logger.info(f"Mean results per strategy:\n{summary.to_string()}")

    return 0

if __name__ == "__main__":
    sys.exit(main())
