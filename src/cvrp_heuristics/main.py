"""
CVRP Solver Command Line
========================

Solve one CVRP instance stored as JSON and export the resulting route plan.

Usage:
    cvrp-solve --instance instances/n40.json --strategy annealing --seed 7

    # Or import and run programmatically
    from cvrp_heuristics.main import run
    solution = run("instances/n40.json", strategy="savings")
"""

import os
import sys
import argparse
import logging
from datetime import datetime

from cvrp_heuristics.cvrp_main import STRATEGIES, run_strategy
from cvrp_heuristics.problem.cvrp_problem import CVRPInputError, load_problem
from cvrp_heuristics.utils.config import DEFAULT_CONFIG_PATH, load_config
from cvrp_heuristics.utils.export_json_solution import export_json_solution

logger = logging.getLogger(__name__)

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
            logging.FileHandler(f"log/cvrp_solve_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"),
            logging.StreamHandler()
        ]
    )

def run(instance_path, strategy=None, config_path=DEFAULT_CONFIG_PATH, seed=None, output=None):
    """
    Load, solve and export one instance.

    Args:
        instance_path (str): Path to the instance JSON file
        strategy (str, optional): Strategy name (default: from config)
        config_path (str): Path to the solver configuration file
        seed (int, optional): Random seed for stochastic strategies
        output (str, optional): Output JSON path (default: timestamped file in results/)

    Returns:
        CVRPSolution or None: The plan found, None if no plan met the budget

    Raises:
        CVRPInputError: If the instance is malformed
    """
    config = load_config(config_path)
    strategy = strategy or config.get("DEFAULT_STRATEGY", "iterative")

    problem = load_problem(instance_path)
    results = run_strategy(problem, strategy=strategy, config=config, seed=seed)
    solution = results["best_solution"]

    json_file, data = export_json_solution(problem, solution, stats=results["stats"], strategy=strategy,
                                           filename=output)

    if solution is None:
        logger.info("No valid solution found")
    else:
        logger.info(f"Solution found: {solution.routes}")
        logger.info(f"Total distance: {data['summary']['total_distance']} "
                    f"(bound {problem.max_total_distance})")
    logger.info(f"Results written to {json_file}")

    return solution

def main(argv=None):
    parser = argparse.ArgumentParser(description='Solve a capacitated vehicle routing instance')
    parser.add_argument('--instance', required=True, help='Path to the instance JSON file')
    parser.add_argument('--strategy', choices=sorted(STRATEGIES), default=None,
                        help='Solving strategy (default: DEFAULT_STRATEGY from the config)')
    parser.add_argument('--config', default=DEFAULT_CONFIG_PATH, help='Path to the solver configuration file')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for stochastic strategies')
    parser.add_argument('--output', default=None, help='Path of the exported JSON route plan')

    args = parser.parse_args(argv)

    setup_logging()

    if not os.path.exists(args.instance):
        logger.error(f"Instance file not found: {args.instance}")
        return 1

    try:
        run(args.instance, strategy=args.strategy, config_path=args.config, seed=args.seed, output=args.output)
    except CVRPInputError as e:
        logger.error(f"Invalid instance: {e}")
        return 2
    except Exception as e:
        logger.error(f"An error occurred during solving: {e}", exc_info=True)
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
