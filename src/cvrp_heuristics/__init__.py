"""
Heuristic solvers for the Capacitated Vehicle Routing Problem.
Construction heuristics, local search operators and metaheuristic controllers
behind one solve_challenge() entry point.
"""

from .problem import CVRPProblem, CVRPInputError, RouteValidator, load_problem
from .solvers import (
    CVRPSolution,
    CVRPOperators,
    IterativeRefinement,
    SimulatedAnnealing,
    nearest_neighbor,
    pack_routes,
    randomized_pack,
    savings_merge,
)
from .cvrp_main import STRATEGIES, run_strategy, solve_annealing, solve_challenge, solve_iterative, solve_savings

__all__ = [
    'CVRPProblem',
    'CVRPInputError',
    'RouteValidator',
    'load_problem',
    'CVRPSolution',
    'CVRPOperators',
    'IterativeRefinement',
    'SimulatedAnnealing',
    'nearest_neighbor',
    'pack_routes',
    'randomized_pack',
    'savings_merge',
    'STRATEGIES',
    'run_strategy',
    'solve_annealing',
    'solve_challenge',
    'solve_iterative',
    'solve_savings',
]
