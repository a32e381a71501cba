import numpy as np
import pytest

from cvrp_heuristics.problem.cvrp_problem import CVRPProblem


FIVE_NODE_MATRIX = [
    [0, 10, 20, 30, 40],
    [10, 0, 15, 25, 35],
    [20, 15, 0, 20, 30],
    [30, 25, 20, 0, 10],
    [40, 35, 30, 10, 0],
]

# d[a, b] != d[b, a] for most pairs
ASYMMETRIC_MATRIX = [
    [0, 8, 12, 8, 6, 11],
    [19, 0, 5, 18, 5, 13],
    [7, 16, 0, 17, 12, 11],
    [9, 0, 2, 0, 12, 11],
    [2, 16, 15, 10, 0, 16],
    [10, 19, 5, 7, 16, 0],
]


def make_problem(matrix, demands, capacity, max_total_distance, seed=None):
    return CVRPProblem(
        distance_matrix=matrix,
        demands=demands,
        capacity=capacity,
        max_total_distance=max_total_distance,
        seed=seed,
    )


def make_random_problem(num_customers=15, seed=0, capacity=60, max_total_distance=10_000):
    """Euclidean instance on a 100x100 grid with rounded integer distances."""
    rng = np.random.default_rng(seed)
    coords = rng.integers(0, 100, size=(num_customers + 1, 2))
    diff = coords[:, None, :] - coords[None, :, :]
    matrix = np.rint(np.sqrt((diff ** 2).sum(axis=2))).astype(np.int64)
    demands = rng.integers(1, 30, size=num_customers + 1)
    demands[0] = 0
    return make_problem(matrix, demands, capacity, max_total_distance, seed=seed)


def line_problem(num_customers=4, capacity=10, max_total_distance=100):
    """Customers on a line at x = 1..n, depot at x = 0, unit demands."""
    positions = np.arange(num_customers + 1)
    matrix = np.abs(positions[:, None] - positions[None, :])
    demands = [0] + [1] * num_customers
    return make_problem(matrix, demands, capacity, max_total_distance)


def asymmetric_problem(max_total_distance=1000):
    return make_problem(ASYMMETRIC_MATRIX, [0, 3, 4, 2, 5, 1], 20, max_total_distance)


@pytest.fixture
def five_node_problem():
    return make_problem(FIVE_NODE_MATRIX, [0, 25, 30, 40, 50], 100, 140)


@pytest.fixture
def random_problem():
    return make_random_problem()


@pytest.fixture
def savings_triple_matrix():
    return [
        [0, 10, 10, 10],
        [10, 0, 5, 8],
        [10, 5, 0, 12],
        [10, 8, 12, 0],
    ]


@pytest.fixture
def fast_config():
    return {
        "DEFAULT_STRATEGY": "iterative",
        "INITIAL_TEMPERATURE": 100.0,
        "COOLING_RATE": 0.9,
        "MIN_TEMPERATURE": 1.0,
        "ITERATIONS_PER_TEMPERATURE": 20,
        "MAX_ITERATIONS": 200,
        "SAVINGS_DISTANCE_FACTOR": 1.05,
        "TIME_LIMIT": None,
    }


def assert_valid_plan(problem, routes):
    """Coverage, capacity and depot anchoring of a route plan."""
    visited = []
    for route in routes:
        assert route[0] == 0 and route[-1] == 0
        assert 0 not in route[1:-1]
        assert sum(int(problem.demands[node]) for node in route) <= problem.capacity
        visited.extend(route[1:-1])
    assert sorted(visited) == list(range(1, problem.num_nodes))
