"""
Solver module for the CVRP heuristic suite.
Shared route representation, construction heuristics, local search operators
and metaheuristic controllers.
"""

# Import key components for easy access
from .cvrp_solution import CVRPSolution, pack_routes, route_distance, total_distance
from .construction import randomized_pack, nearest_neighbor, savings_merge
from .cvrp_operators import CVRPOperators
from .annealing import SimulatedAnnealing
from .iterative import IterativeRefinement

# Specify which symbols to export when using "from solvers import *"
__all__ = [
    # Representation
    'CVRPSolution',
    'pack_routes',
    'route_distance',
    'total_distance',

    # Construction
    'randomized_pack',
    'nearest_neighbor',
    'savings_merge',

    # Improvement
    'CVRPOperators',
    'SimulatedAnnealing',
    'IterativeRefinement',
]
