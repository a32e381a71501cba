import numpy as np

from cvrp_heuristics.solvers.construction import nearest_neighbor, randomized_pack, savings_merge, savings_scores
from cvrp_heuristics.solvers.cvrp_operators import CVRPOperators
from cvrp_heuristics.solvers.cvrp_solution import route_distance

from conftest import assert_valid_plan, make_problem, make_random_problem


def test_nearest_neighbor_five_node_scenario(five_node_problem):
    solution = nearest_neighbor(five_node_problem)

    assert solution.routes == [[0, 1, 2, 3, 0], [0, 4, 0]]
    assert_valid_plan(five_node_problem, solution.routes)
    assert solution.total_distance() == 155

    # 2-opt finds nothing to reverse on either route
    operators = CVRPOperators(five_node_problem)
    assert operators.two_opt(solution) == 0
    assert solution.routes == [[0, 1, 2, 3, 0], [0, 4, 0]]


def test_nearest_neighbor_breaks_ties_by_lowest_index():
    matrix = [
        [0, 5, 5, 9],
        [5, 0, 4, 4],
        [5, 4, 0, 4],
        [9, 4, 4, 0],
    ]
    problem = make_problem(matrix, [0, 1, 1, 1], 10, 100)
    assert nearest_neighbor(problem).routes == [[0, 1, 2, 3, 0]]


def test_nearest_neighbor_on_random_instance(random_problem):
    solution = nearest_neighbor(random_problem)
    assert_valid_plan(random_problem, solution.routes)


def test_randomized_pack_is_reproducible(random_problem):
    first = randomized_pack(random_problem, np.random.default_rng(11))
    second = randomized_pack(random_problem, np.random.default_rng(11))

    assert first.routes == second.routes
    assert_valid_plan(random_problem, first.routes)


def test_savings_scores_sorted_descending(savings_triple_matrix):
    problem = make_problem(savings_triple_matrix, [0, 10, 10, 10], 25, 100)
    scores = savings_scores(problem)
    assert scores == [(15, 1, 2), (12, 1, 3), (8, 2, 3)]


def test_savings_merges_one_pair_when_third_does_not_fit(savings_triple_matrix):
    problem = make_problem(savings_triple_matrix, [0, 10, 10, 10], 25, 100)
    solution = savings_merge(problem)

    assert solution.routes == [[0, 1, 2, 0], [0, 3, 0]]
    assert_valid_plan(problem, solution.routes)


def test_savings_merges_nothing_when_pairs_exceed_capacity(savings_triple_matrix):
    problem = make_problem(savings_triple_matrix, [0, 10, 10, 10], 15, 100)
    solution = savings_merge(problem)
    assert solution.routes == [[0, 1, 0], [0, 2, 0], [0, 3, 0]]


def test_savings_rejected_merge_keeps_both_routes(savings_triple_matrix):
    # Bound 20 * 1.05 = 21 admits no two-customer route
    problem = make_problem(savings_triple_matrix, [0, 10, 10, 10], 100, 20)
    solution = savings_merge(problem)

    assert solution.routes == [[0, 1, 0], [0, 2, 0], [0, 3, 0]]
    assert_valid_plan(problem, solution.routes)


def test_savings_merged_routes_stay_within_distance_bound():
    problem = make_random_problem(num_customers=20, seed=4, capacity=80, max_total_distance=150)
    solution = savings_merge(problem)
    limit = problem.max_total_distance * 1.05

    assert_valid_plan(problem, solution.routes)
    for route in solution.routes:
        if len(route) > 3:
            assert route_distance(route, problem.distance_matrix) <= limit


def test_savings_on_random_instance(random_problem):
    solution = savings_merge(random_problem)
    assert_valid_plan(random_problem, solution.routes)
    assert len(solution.routes) < random_problem.num_nodes - 1
