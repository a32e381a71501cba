"""
CVRP Solver Facade
==================

One entry point per solving strategy, plus a dispatcher keyed by strategy name.

Strategies:
- "annealing": simulated annealing from a randomized pack; always returns a plan
- "savings": Clarke-Wright savings construction; always returns a plan
- "iterative": nearest neighbour + local search; returns a plan only if it
  meets the instance's distance bound within the iteration budget

Outcomes:
- a CVRPSolution
- None ("no solution found" within the budget; iterative strategy only)
- CVRPInputError raised for malformed instances

The per-strategy functions and run_strategy() return the full results
dictionary ({"best_solution", "best_distance", "stats"}); solve_challenge()
returns only the plan.

Usage:
    from cvrp_heuristics import solve_challenge, load_problem

    problem = load_problem("instance.json")
    solution = solve_challenge(problem, strategy="annealing", seed=7)

    results = run_strategy(problem, strategy="iterative")
    print(results["stats"]["iterations"])
"""

import time
import logging

from cvrp_heuristics.problem.constraints import RouteValidator
from cvrp_heuristics.solvers.annealing import SimulatedAnnealing
from cvrp_heuristics.solvers.construction import savings_merge
from cvrp_heuristics.solvers.iterative import IterativeRefinement
from cvrp_heuristics.utils.config import load_config

logger = logging.getLogger(__name__)


def _check_solution(problem, solution, strategy):
    """Re-verify a returned plan; a broken invariant here is an internal error."""
    if solution is None:
        return None

    violations = RouteValidator.verify_solution(problem, solution)
    if violations:
        logger.warning(f"Strategy '{strategy}' produced an invalid plan: {violations}")
        raise RuntimeError(f"Strategy '{strategy}' produced an invalid plan ({len(violations)} violations)")
    return solution


def solve_annealing(problem, config=None, seed=None):
    """
    Solve with simulated annealing.

    Args:
        problem: CVRPProblem instance
        config (dict, optional): Configuration dictionary (default: packaged config)
        seed (int, optional): Random seed; falls back to problem.seed

    Returns:
        dict: Results dictionary with best_solution, best_distance and stats
    """
    config = config if config is not None else load_config()
    annealing_config = {
        "initial_temperature": config["INITIAL_TEMPERATURE"],
        "cooling_rate": config["COOLING_RATE"],
        "min_temperature": config["MIN_TEMPERATURE"],
        "iterations_per_temperature": config["ITERATIONS_PER_TEMPERATURE"],
        "time_limit": config.get("TIME_LIMIT"),
        "seed": seed,
    }
    results = SimulatedAnnealing(problem, **annealing_config).run()
    _check_solution(problem, results["best_solution"], "annealing")
    return results


def solve_savings(problem, config=None, seed=None):
    """
    Solve with the Clarke-Wright savings construction.

    Args:
        problem: CVRPProblem instance
        config (dict, optional): Configuration dictionary (default: packaged config)
        seed: Unused; accepted so every strategy shares one signature

    Returns:
        dict: Results dictionary with best_solution, best_distance and stats
    """
    config = config if config is not None else load_config()

    start_time = time.time()
    solution = savings_merge(problem, distance_factor=config["SAVINGS_DISTANCE_FACTOR"])
    runtime = time.time() - start_time

    _check_solution(problem, solution, "savings")
    num_customers = problem.num_nodes - 1
    best_distance = solution.total_distance()
    return {
        "best_solution": solution,
        "best_distance": best_distance,
        "stats": {
            # every accepted merge joins two routes into one
            "merges": num_customers - len(solution.routes) if num_customers else 0,
            "num_routes": len(solution.routes),
            "best_distance": best_distance,
            "runtime": runtime,
        },
    }


def solve_iterative(problem, config=None, seed=None):
    """
    Solve with iterative refinement.

    Args:
        problem: CVRPProblem instance
        config (dict, optional): Configuration dictionary (default: packaged config)
        seed: Unused; the strategy is deterministic

    Returns:
        dict: Results dictionary; best_solution is None if the budget ran out
              before the distance bound was met
    """
    config = config if config is not None else load_config()
    results = IterativeRefinement(
        problem,
        max_iterations=config["MAX_ITERATIONS"],
        time_limit=config.get("TIME_LIMIT"),
    ).run()
    _check_solution(problem, results["best_solution"], "iterative")
    return results


STRATEGIES = {
    "annealing": solve_annealing,
    "savings": solve_savings,
    "iterative": solve_iterative,
}


def run_strategy(problem, strategy=None, config=None, seed=None):
    """
    Run the named strategy and return its full results dictionary.

    Args:
        problem: CVRPProblem instance (already validated on construction)
        strategy (str, optional): One of STRATEGIES (default: config DEFAULT_STRATEGY)
        config (dict, optional): Configuration dictionary (default: packaged config)
        seed (int, optional): Random seed for stochastic strategies

    Returns:
        dict: best_solution (CVRPSolution or None), best_distance, stats and
              the strategy name

    Raises:
        ValueError: If the strategy name is unknown
        CVRPInputError: If a route cannot be packed because of malformed input
    """
    config = config if config is not None else load_config()
    strategy = strategy or config.get("DEFAULT_STRATEGY", "iterative")

    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{strategy}'. Available: {', '.join(sorted(STRATEGIES))}")

    logger.info(f"Solving {problem.num_nodes - 1}-customer instance with strategy '{strategy}'")
    results = STRATEGIES[strategy](problem, config=config, seed=seed)
    results["strategy"] = strategy

    solution = results["best_solution"]
    if solution is None:
        logger.info(f"Strategy '{strategy}' found no solution within its budget")
    else:
        logger.info(f"Strategy '{strategy}' returned {len(solution.routes)} routes, "
                    f"total distance {solution.total_distance()}")
    return results


def solve_challenge(problem, strategy=None, config=None, seed=None):
    """
    Solve a CVRP instance with the named strategy.

    Args:
        problem: CVRPProblem instance (already validated on construction)
        strategy (str, optional): One of STRATEGIES (default: config DEFAULT_STRATEGY)
        config (dict, optional): Configuration dictionary (default: packaged config)
        seed (int, optional): Random seed for stochastic strategies

    Returns:
        CVRPSolution or None

    Raises:
        ValueError: If the strategy name is unknown
        CVRPInputError: If a route cannot be packed because of malformed input
    """
    return run_strategy(problem, strategy=strategy, config=config, seed=seed)["best_solution"]
