"""
Iterative Refinement for the CVRP
=================================

Deterministic construct-and-improve loop:

1. Nearest-neighbour construction followed by 2-opt
2. Repeatedly: clone the best plan, apply one relocate move, one swap move and
   2-opt, keep the result if it is shorter
3. Stop with success as soon as the best plan meets the instance's distance
   bound; report no solution if the iteration budget runs out first

Because every step is deterministic, a step that fails to improve the best plan
would repeat identically forever, so the loop also stops there.
"""

import time
import logging

from cvrp_heuristics.solvers.construction import nearest_neighbor
from cvrp_heuristics.solvers.cvrp_operators import CVRPOperators

logger = logging.getLogger(__name__)

class IterativeRefinement:
    """
    Construct-then-improve controller with a distance-bound success test.

    Attributes:
        problem: The CVRPProblem instance
        operators: CVRPOperators bound to the problem
        best_solution / best_distance: Best plan found so far
    """
    def __init__(self, problem, max_iterations=1000, time_limit=None, initial_solution=None):
        """
        Initialize the controller and build the starting plan.

        Args:
            problem: The CVRPProblem instance
            max_iterations: Maximum improvement rounds (default: 1000)
            time_limit: Maximum runtime in seconds (default: None)
            initial_solution: Optional starting plan (default: nearest neighbour)
        """
        self.problem = problem
        self.max_iterations = max_iterations
        self.time_limit = time_limit
        self.operators = CVRPOperators(problem)

        if initial_solution is not None:
            self.best_solution = initial_solution.clone()
        else:
            self.best_solution = nearest_neighbor(problem)
        self.initial_distance = self.best_solution.total_distance()

        self.operators.two_opt(self.best_solution)
        self.best_distance = self.best_solution.total_distance()

        self.stats = {
            "iterations": 0,
            "initial_distance": self.initial_distance,
            "best_distance": self.best_distance,
            "best_found_at": 0,
            "runtime": 0,
            "converged": False,
            "timeout": False,
            "target_met": False,
        }

    def target_met(self):
        return self.best_distance <= self.problem.max_total_distance

    def step(self):
        """
        One improvement round on a clone of the best plan.

        Returns:
            bool: True if the round produced a shorter plan
        """
        candidate = self.best_solution.clone()
        self.operators.relocate(candidate)
        self.operators.swap(candidate)
        self.operators.two_opt(candidate)

        candidate_distance = candidate.total_distance()
        self.stats["iterations"] += 1

        if candidate_distance < self.best_distance:
            self.best_solution = candidate
            self.best_distance = candidate_distance
            self.stats["best_distance"] = candidate_distance
            self.stats["best_found_at"] = self.stats["iterations"]
            return True
        return False

    def run(self, verbose=False):
        """
        Improve until the distance bound is met or the budget is spent.

        Args:
            verbose (bool): Log every improving round

        Returns:
            dict: Results dictionary containing:
                - best_solution: The plan meeting the bound, or None
                - best_distance: Distance of the best plan seen
                - stats: Counters and timings of the run
        """
        logger.info(f"Starting iterative refinement (initial distance {self.initial_distance}, "
                    f"after 2-opt {self.best_distance}, target {self.problem.max_total_distance})")

        start_time = time.time()
        while not self.target_met():
            if self.stats["iterations"] >= self.max_iterations:
                logger.info("Terminating: Maximum iterations reached")
                break

            if self.time_limit and time.time() - start_time > self.time_limit:
                logger.info("Terminating: Time limit reached")
                self.stats["timeout"] = True
                break

            if not self.step():
                logger.info(f"Terminating: Converged after {self.stats['iterations']} iterations")
                self.stats["converged"] = True
                break

            if verbose:
                logger.info(f"Iteration {self.stats['iterations']}: new best distance {self.best_distance}")

        self.stats["runtime"] = time.time() - start_time
        self.stats["target_met"] = self.target_met()

        if self.stats["target_met"]:
            logger.info(f"Distance bound met: {self.best_distance} <= {self.problem.max_total_distance}")
            best_solution = self.best_solution
        else:
            logger.info(f"No solution within budget: best distance {self.best_distance} "
                        f"> {self.problem.max_total_distance}")
            best_solution = None

        return {
            "best_solution": best_solution,
            "best_distance": self.best_distance,
            "stats": self.stats,
        }
