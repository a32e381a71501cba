"""
Simulated Annealing for the CVRP
================================

This module implements a simulated annealing controller over capacity-feasible
route plans.

Key Features:
- Randomized-pack starting solution
- Intra-route swap neighbourhood, re-packed to restore capacity feasibility
- Metropolis acceptance with a geometric cooling schedule
- Best-ever tracking, so the returned plan never gets worse than the start
- Optional wall-clock limit checked between temperature levels

All randomness comes from one numpy Generator owned by the controller, so a
fixed seed reproduces the same search.
"""

import math
import time
import logging
import numpy as np

from cvrp_heuristics.solvers.cvrp_solution import pack_routes
from cvrp_heuristics.solvers.construction import randomized_pack

logger = logging.getLogger(__name__)

class SimulatedAnnealing:
    """
    Simulated annealing over CVRP route plans.

    Attributes:
        problem: The CVRPProblem instance
        rng: numpy Generator used for every random draw
        current_solution / current_distance: Working candidate and its cost
        best_solution / best_distance: Best candidate seen so far
        temperature: Current annealing temperature
    """
    def __init__(
        self,
        problem,
        initial_temperature=1000.0,
        cooling_rate=0.995,
        min_temperature=1e-3,
        iterations_per_temperature=100,
        time_limit=None,
        seed=None,
        initial_solution=None,
    ):
        """
        Initialize the annealing controller.

        Args:
            problem: The CVRPProblem instance
            initial_temperature: Starting temperature (default: 1000.0)
            cooling_rate: Multiplicative cooling factor per level (default: 0.995)
            min_temperature: Temperature floor that ends the search (default: 1e-3)
            iterations_per_temperature: Neighbours tried per level (default: 100)
            time_limit: Maximum runtime in seconds (default: None)
            seed: Random seed; falls back to problem.seed (default: None)
            initial_solution: Optional starting plan (default: randomized pack)
        """
        self.problem = problem
        self.initial_temperature = initial_temperature
        self.cooling_rate = cooling_rate
        self.min_temperature = min_temperature
        self.iterations_per_temperature = iterations_per_temperature
        self.time_limit = time_limit
        self.seed = seed if seed is not None else problem.seed
        self.rng = np.random.default_rng(self.seed)

        if initial_solution is not None:
            self.current_solution = initial_solution.clone()
        else:
            self.current_solution = randomized_pack(problem, self.rng)
        self.current_distance = self.current_solution.total_distance()

        self.best_solution = self.current_solution.clone()
        self.best_distance = self.current_distance

        self.temperature = self.initial_temperature

        self.stats = {
            "iterations": 0,
            "temperature_levels": 0,
            "accepted_count": 0,
            "rejected_count": 0,
            "initial_distance": self.current_distance,
            "best_distance": self.best_distance,
            "best_found_at": 0,
            "runtime": 0,
            "timeout": False,
        }

    def generate_neighbor(self, solution):
        """
        Build a neighbour by swapping two positions inside one random route.

        The mutated route is passed back through pack_routes and spliced into
        the plan in its place; the other routes are left as they are.

        Args:
            solution: Current CVRPSolution (not modified)

        Returns:
            CVRPSolution: The neighbouring plan
        """
        neighbor = solution.clone()
        route_idx = int(self.rng.integers(len(neighbor.routes)))
        route = neighbor.routes[route_idx]

        if len(route) > 3:
            pos1 = int(self.rng.integers(1, len(route) - 1))
            pos2 = int(self.rng.integers(1, len(route) - 1))
            route[pos1], route[pos2] = route[pos2], route[pos1]

        repacked = pack_routes(route[1:-1], self.problem.demands, self.problem.capacity)
        neighbor.routes[route_idx:route_idx + 1] = repacked
        return neighbor

    def accept_solution(self, new_distance):
        """
        Metropolis acceptance test.

        Args:
            new_distance: Total distance of the candidate

        Returns:
            bool: True if the candidate replaces the current solution
        """
        if new_distance < self.current_distance:
            acceptance_prob = 1.0
        else:
            acceptance_prob = math.exp((self.current_distance - new_distance) / self.temperature)
        return self.rng.random() < acceptance_prob

    def is_finished(self):
        return self.temperature < self.min_temperature

    def step(self):
        """
        Run one temperature level, then cool.

        Returns:
            bool: True if a new best solution was found during this level
        """
        found_best = False

        for _ in range(self.iterations_per_temperature):
            neighbor = self.generate_neighbor(self.current_solution)
            neighbor_distance = neighbor.total_distance()
            self.stats["iterations"] += 1

            if self.accept_solution(neighbor_distance):
                self.current_solution = neighbor
                self.current_distance = neighbor_distance
                self.stats["accepted_count"] += 1

                if self.current_distance < self.best_distance:
                    self.best_solution = self.current_solution.clone()
                    self.best_distance = self.current_distance
                    self.stats["best_distance"] = self.best_distance
                    self.stats["best_found_at"] = self.stats["iterations"]
                    found_best = True
            else:
                self.stats["rejected_count"] += 1

        self.temperature *= self.cooling_rate
        self.stats["temperature_levels"] += 1
        return found_best

    def run(self, verbose=False):
        """
        Anneal until the temperature drops below the floor.

        Args:
            verbose (bool): Log every temperature level that finds a new best

        Returns:
            dict: Results dictionary containing:
                - best_solution: The best CVRPSolution found
                - best_distance: Its total distance
                - stats: Counters and timings of the run
        """
        logger.info(f"Starting simulated annealing (T0={self.initial_temperature}, "
                    f"cooling={self.cooling_rate}, initial distance={self.current_distance})")

        start_time = time.time()
        while not self.is_finished():
            if self.time_limit and time.time() - start_time > self.time_limit:
                logger.info("Terminating: Time limit reached")
                self.stats["timeout"] = True
                break

            if self.step() and verbose:
                logger.info(f"Level {self.stats['temperature_levels']}: new best distance "
                            f"{self.best_distance} (T={self.temperature:.4f})")

        self.stats["runtime"] = time.time() - start_time
        logger.info(f"Simulated annealing finished after {self.stats['iterations']} iterations "
                    f"in {self.stats['runtime']:.2f}s, best distance {self.best_distance}")

        return {
            "best_solution": self.best_solution,
            "best_distance": self.best_distance,
            "stats": self.stats,
        }
