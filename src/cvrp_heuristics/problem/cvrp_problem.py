"""
CVRP Problem Definition
=======================

This module defines the CVRPProblem class, which holds the read-only inputs of a
Capacitated Vehicle Routing Problem instance and checks them before any solver
touches them.

The problem includes:
- A square distance matrix (node 0 is the depot, asymmetry allowed)
- Integer customer demands (the depot carries no demand)
- A per-vehicle capacity
- A target total-distance bound

Usage:
    problem = CVRPProblem(
        distance_matrix=matrix,
        demands=[0, 25, 30, 40, 50],
        capacity=100,
        max_total_distance=140
    )

    problem = load_problem("instances/n40_seed0.json")
"""

import json
import logging
import numpy as np

logger = logging.getLogger(__name__)


class CVRPInputError(ValueError):
    """Raised when an instance violates an input invariant (e.g. a demand above capacity)."""


class CVRPProblem:
    """
    Capacitated Vehicle Routing Problem instance.

    Attributes:
        distance_matrix (np.ndarray): Square integer matrix of edge costs
        demands (np.ndarray): Demand per node, demands[0] == 0
        capacity (int): Maximum cumulative demand per route
        max_total_distance (float): Target bound on summed route distance
        num_nodes (int): Number of nodes including the depot
        seed (int or None): Seed for the explicit random source
    """

    DEPOT = 0

    def __init__(self, distance_matrix, demands, capacity, max_total_distance, seed=None):
        """
        Initialize and validate a CVRP instance.

        Args:
            distance_matrix: Nested sequence or array of non-negative costs
            demands: Sequence of integer demands indexed by node
            capacity (int): Vehicle capacity
            max_total_distance (float): Target bound on the total distance
            seed (int, optional): Seed used by the stochastic strategies

        Raises:
            CVRPInputError: If any input invariant is violated
        """
        self.distance_matrix = np.asarray(distance_matrix)
        self.demands = np.asarray(demands)
        self.capacity = capacity
        self.max_total_distance = max_total_distance
        self.seed = seed
        self.num_nodes = len(self.demands)

        self.validate_inputs()

    def validate_inputs(self):
        """
        Check the instance and fail fast on malformed input.

        Checks performed:
        - distance matrix is 2-D, square and matches the number of demands
        - distances and demands are non-negative, the depot has no demand
        - capacity is positive and no single demand exceeds it

        Raises:
            CVRPInputError: On the first violated invariant
        """
        logger.info("Validating CVRP instance...")

        def fail(message):
            logger.error(message)
            raise CVRPInputError(message)

        if self.distance_matrix.ndim != 2 or self.distance_matrix.shape[0] != self.distance_matrix.shape[1]:
            fail(f"Distance matrix must be square, got shape {self.distance_matrix.shape}")

        if self.demands.ndim != 1 or self.num_nodes < 1:
            fail("Demands must be a non-empty one-dimensional sequence")

        if self.distance_matrix.shape[0] != self.num_nodes:
            fail(f"Distance matrix size {self.distance_matrix.shape[0]} does not match "
                 f"{self.num_nodes} demands")

        if not np.issubdtype(self.distance_matrix.dtype, np.number) or not np.issubdtype(self.demands.dtype, np.integer):
            fail("Distances must be numeric and demands must be integers")

        if (self.distance_matrix < 0).any():
            fail("Distance matrix contains negative costs")

        if self.demands[self.DEPOT] != 0:
            fail(f"Depot demand must be 0, got {self.demands[self.DEPOT]}")

        if (self.demands < 0).any():
            fail("Demands must be non-negative")

        if self.capacity <= 0:
            fail(f"Capacity must be positive, got {self.capacity}")

        over_capacity = np.flatnonzero(self.demands > self.capacity)
        if over_capacity.size:
            fail(f"Nodes {over_capacity.tolist()} have demand above capacity {self.capacity}")

        logger.info(f"Instance valid: {self.num_nodes - 1} customers, capacity {self.capacity}, "
                    f"total demand {int(self.demands.sum())}")

    def customers(self):
        """Customer node indices (everything except the depot)."""
        return list(range(1, self.num_nodes))

    def to_dict(self):
        return {
            "distance_matrix": self.distance_matrix.tolist(),
            "demands": self.demands.tolist(),
            "capacity": self.capacity,
            "max_total_distance": self.max_total_distance,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data):
        """
        Build an instance from a mapping.

        Accepts ``capacity`` or ``max_capacity`` for the vehicle capacity.

        Raises:
            CVRPInputError: If a required field is missing or invalid
        """
        capacity = data.get("capacity", data.get("max_capacity"))
        missing = [key for key in ("distance_matrix", "demands", "max_total_distance") if key not in data]
        if capacity is None:
            missing.append("capacity")
        if missing:
            message = f"Instance is missing required fields: {', '.join(missing)}"
            logger.error(message)
            raise CVRPInputError(message)

        return cls(
            distance_matrix=data["distance_matrix"],
            demands=data["demands"],
            capacity=capacity,
            max_total_distance=data["max_total_distance"],
            seed=data.get("seed"),
        )


def load_problem(path):
    """
    Load a CVRP instance from a JSON file.

    Args:
        path (str): Path to a JSON file with distance_matrix, demands,
                    capacity (or max_capacity), max_total_distance and optional seed

    Returns:
        CVRPProblem: The validated instance

    Raises:
        CVRPInputError: If the file is not a JSON object or fails validation
        OSError: If the file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing instance file {path}: {e}")
            raise CVRPInputError(f"Instance file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        message = f"Instance file {path} must contain a JSON object, got {type(data).__name__}"
        logger.error(message)
        raise CVRPInputError(message)

    logger.info(f"Loaded instance from {path}")
    return CVRPProblem.from_dict(data)
