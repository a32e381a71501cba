import pytest

from cvrp_heuristics.problem.cvrp_problem import CVRPInputError
from cvrp_heuristics.solvers.cvrp_solution import CVRPSolution, pack_routes, route_distance, total_distance


DEMANDS = [0, 25, 30, 40, 50]


def test_pack_routes_starts_new_route_on_overflow():
    routes = pack_routes([1, 2, 3, 4], DEMANDS, 100)
    assert routes == [[0, 1, 2, 3, 0], [0, 4, 0]]


def test_pack_routes_preserves_input_order():
    order = [4, 3, 2, 1]
    routes = pack_routes(order, DEMANDS, 100)
    assert [node for route in routes for node in route[1:-1]] == order
    assert routes == [[0, 4, 3, 0], [0, 2, 1, 0]]


def test_pack_routes_empty_sequence_gives_sentinel_route():
    assert pack_routes([], DEMANDS, 100) == [[0, 0]]


def test_pack_routes_is_idempotent(random_problem):
    order = [5, 3, 12, 1, 8, 15, 2, 9, 4, 7, 11, 6, 13, 10, 14]
    routes = pack_routes(order, random_problem.demands, random_problem.capacity)
    flat = [node for route in routes for node in route[1:-1]]
    assert pack_routes(flat, random_problem.demands, random_problem.capacity) == routes


def test_pack_routes_respects_capacity(random_problem):
    routes = pack_routes(random_problem.customers(), random_problem.demands, random_problem.capacity)
    for route in routes:
        assert sum(int(random_problem.demands[node]) for node in route) <= random_problem.capacity


def test_pack_routes_rejects_oversized_demand():
    with pytest.raises(CVRPInputError):
        pack_routes([1, 2], [0, 5, 200], 100)


def test_route_distance_includes_depot_edges(five_node_problem):
    matrix = five_node_problem.distance_matrix
    assert route_distance([0, 1, 2, 3, 0], matrix) == 10 + 15 + 20 + 30
    assert route_distance([0, 4, 0], matrix) == 80
    assert route_distance([0, 0], matrix) == 0
    assert total_distance([[0, 1, 2, 3, 0], [0, 4, 0]], matrix) == 155


def test_clone_is_independent(five_node_problem):
    solution = CVRPSolution(five_node_problem, [[0, 1, 2, 0], [0, 3, 4, 0]])
    copy = solution.clone()
    copy.routes[0].reverse()
    copy.routes.append([0, 0])
    assert solution.routes == [[0, 1, 2, 0], [0, 3, 4, 0]]


def test_evaluate_reports_loads_and_distances(five_node_problem):
    solution = CVRPSolution(five_node_problem, [[0, 1, 2, 0], [0, 3, 4, 0]])
    evaluation = solution.evaluate()

    assert evaluation["total_distance"] == 125
    assert evaluation["route_loads"] == [55, 90]
    assert evaluation["route_distances"] == [45, 80]
    assert evaluation["is_feasible"]
    assert evaluation["violations"] == []


def test_evaluate_flags_overloaded_route(five_node_problem):
    solution = CVRPSolution(five_node_problem, [[0, 1, 2, 3, 4, 0]])
    evaluation = solution.evaluate()
    assert not evaluation["is_feasible"]
    assert evaluation["violations"][0]["type"] == "capacity_violation"


def test_remove_empty_routes(five_node_problem):
    solution = CVRPSolution(five_node_problem, [[0, 0], [0, 1, 2, 0], [0, 0], [0, 3, 4, 0]])
    solution.remove_empty_routes()
    assert solution.routes == [[0, 1, 2, 0], [0, 3, 4, 0]]
