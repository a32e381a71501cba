"""
CVRP Solution Representation
============================

This module provides the core data structure for route plans together with the
two pure helpers every solver shares:

- pack_routes(): greedy capacity packing of a customer sequence into
  depot-bracketed routes
- route_distance() / total_distance(): edge-cost sums over routes

The CVRPSolution class handles:
- Route storage (each route starts and ends at the depot, node 0)
- Cloning for candidate generation
- Load and distance bookkeeping
- Evaluation and feasibility checking against the problem invariants
"""

import copy
import logging
import numpy as np

from cvrp_heuristics.problem.cvrp_problem import CVRPInputError
from cvrp_heuristics.problem.constraints import RouteValidator

logger = logging.getLogger(__name__)

DEPOT = 0


def pack_routes(nodes, demands, capacity):
    """
    Split an ordered customer sequence into capacity-feasible routes.

    Nodes are packed left to right; a new route starts whenever the next node
    would overflow the current one. Input order is preserved, so every route
    interior is a contiguous slice of ``nodes``. An empty sequence yields the
    single sentinel route ``[0, 0]``.

    Args:
        nodes: Ordered, depot-free sequence of customer indices
        demands: Demand per node
        capacity (int): Vehicle capacity

    Returns:
        list: Depot-bracketed routes

    Raises:
        CVRPInputError: If a node's demand alone exceeds capacity
    """
    routes = [[DEPOT]]
    current_load = 0

    for node in nodes:
        demand = demands[node]
        if demand > capacity:
            raise CVRPInputError(f"Node {node} has demand {demand} above capacity {capacity}")

        if current_load + demand > capacity:
            routes[-1].append(DEPOT)
            routes.append([DEPOT])
            current_load = 0

        routes[-1].append(int(node))
        current_load += demand

    routes[-1].append(DEPOT)
    return routes


def route_distance(route, distance_matrix):
    """Sum of edge costs along a depot-bracketed route."""
    nodes = np.asarray(route, dtype=np.intp)
    return distance_matrix[nodes[:-1], nodes[1:]].sum().item()


def total_distance(routes, distance_matrix):
    """Sum of route distances over a whole plan."""
    return sum(route_distance(route, distance_matrix) for route in routes)


class CVRPSolution:
    """
    Route plan for a CVRP instance.

    Attributes:
        problem: Reference to the CVRPProblem instance
        routes: List of routes, each a list of node indices that begins and
               ends with the depot
    """
    def __init__(self, problem, routes=None):
        self.problem = problem
        self.routes = [list(route) for route in routes] if routes is not None else []

    def clone(self):
        """Create a deep copy of this solution"""
        return CVRPSolution(self.problem, copy.deepcopy(self.routes))

    def route_load(self, route_idx):
        return int(sum(self.problem.demands[node] for node in self.routes[route_idx]))

    def route_distance(self, route_idx):
        return route_distance(self.routes[route_idx], self.problem.distance_matrix)

    def total_distance(self):
        return total_distance(self.routes, self.problem.distance_matrix)

    def customers(self):
        """Flat customer sequence in route order, depot removed."""
        return [node for route in self.routes for node in route[1:-1]]

    def remove_empty_routes(self):
        """Drop routes that no longer serve any customer, keeping at least one route."""
        non_empty = [route for route in self.routes if len(route) > 2]
        self.routes = non_empty if non_empty else self.routes[:1]

    def evaluate(self):
        """
        Evaluate the solution against the problem invariants.

        Returns:
            dict: Evaluation containing:
                - total_distance: Summed route distance
                - num_routes: Number of routes
                - route_loads: Demand carried by each route
                - route_distances: Distance of each route
                - is_feasible: True when no invariant is violated
                - violations: Violation dictionaries from RouteValidator
        """
        violations = RouteValidator.verify_solution(self.problem, self)
        route_distances = [self.route_distance(idx) for idx in range(len(self.routes))]

        return {
            "total_distance": sum(route_distances),
            "num_routes": len(self.routes),
            "route_loads": [self.route_load(idx) for idx in range(len(self.routes))],
            "route_distances": route_distances,
            "is_feasible": not violations,
            "violations": violations,
        }

    def is_feasible(self):
        return not RouteValidator.verify_solution(self.problem, self)

    def to_dict(self):
        return {"routes": [list(route) for route in self.routes]}

    def __repr__(self):
        return f"CVRPSolution(routes={self.routes})"
