"""
Construction Heuristics
=======================

Builders for an initial feasible route plan:

- randomized_pack: random customer order, greedily packed by capacity
- nearest_neighbor: greedy growth from the depot towards the closest
  capacity-feasible customer
- savings_merge: Clarke-Wright pairwise savings, merging routes end to end

Every builder returns a CVRPSolution that satisfies coverage, capacity and
depot anchoring for a valid CVRPProblem.
"""

import logging

from cvrp_heuristics.solvers.cvrp_solution import CVRPSolution, DEPOT, pack_routes, route_distance

logger = logging.getLogger(__name__)


def randomized_pack(problem, rng):
    """
    Shuffle the customers with ``rng`` and pack them into routes.

    Args:
        problem: CVRPProblem instance
        rng (numpy.random.Generator): Caller-owned random source

    Returns:
        CVRPSolution: Randomly ordered, capacity-feasible plan
    """
    order = rng.permutation(problem.customers())
    routes = pack_routes(order, problem.demands, problem.capacity)
    logger.debug(f"Randomized pack built {len(routes)} routes")
    return CVRPSolution(problem, routes)


def nearest_neighbor(problem):
    """
    Greedy nearest-neighbour construction.

    From the last visited node, append the closest unvisited customer whose
    demand still fits; when nothing fits, return to the depot and open a new
    route. Ties go to the lowest node index.

    Args:
        problem: CVRPProblem instance

    Returns:
        CVRPSolution: Nearest-neighbour plan
    """
    distance_matrix = problem.distance_matrix
    demands = problem.demands

    routes = [[DEPOT]]
    unvisited = set(problem.customers())
    current_load = 0

    while unvisited:
        last_node = routes[-1][-1]
        nearest_node = None
        nearest_distance = None

        for node in sorted(unvisited):
            if current_load + demands[node] > problem.capacity:
                continue
            distance = distance_matrix[last_node, node]
            if nearest_distance is None or distance < nearest_distance:
                nearest_distance = distance
                nearest_node = node

        if nearest_node is None:
            # Nothing fits: close this vehicle and start a fresh one
            routes[-1].append(DEPOT)
            routes.append([DEPOT])
            current_load = 0
            continue

        routes[-1].append(nearest_node)
        unvisited.remove(nearest_node)
        current_load += demands[nearest_node]

    routes[-1].append(DEPOT)
    logger.debug(f"Nearest neighbour built {len(routes)} routes")
    return CVRPSolution(problem, routes)


def savings_scores(problem):
    """
    Clarke-Wright savings of every unordered customer pair.

    Returns:
        list: ``(score, i, j)`` tuples with ``i < j``, sorted by descending
              score; equal scores keep their (i, j) generation order
    """
    d = problem.distance_matrix
    scores = []
    for i in range(1, problem.num_nodes):
        d_i0 = d[i, DEPOT]
        for j in range(i + 1, problem.num_nodes):
            scores.append((int(d_i0 + d[DEPOT, j] - d[i, j]), i, j))

    scores.sort(key=lambda entry: entry[0], reverse=True)
    return scores


def savings_merge(problem, distance_factor=1.05):
    """
    Clarke-Wright savings construction.

    Starts with one route per customer and scans customer pairs by descending
    saving. A pair (i, j) joins the route ending in ``i`` to the route starting
    with ``j`` when both are endpoints of different routes, the combined demand
    fits and the merged route's distance stays within
    ``max_total_distance * distance_factor``. A rejected pair leaves both routes
    untouched.

    Args:
        problem: CVRPProblem instance
        distance_factor (float): Admission multiplier on the distance bound

    Returns:
        CVRPSolution: Merged plan, one route per surviving merged chain
    """
    d = problem.distance_matrix
    distance_limit = float(problem.max_total_distance) * distance_factor

    # Routes are stored without depots and indexed by both endpoints;
    # both keys point at the same list object.
    routes = {node: [node] for node in problem.customers()}
    route_demands = {node: int(problem.demands[node]) for node in problem.customers()}

    merges = 0
    rejected = 0
    for score, i, j in savings_scores(problem):
        left_route = routes.get(i)
        right_route = routes.get(j)
        if left_route is None or right_route is None:
            continue
        if left_route is right_route:
            continue

        merged_demand = route_demands[i] + route_demands[j]
        if merged_demand > problem.capacity:
            continue

        # i must end the left route and j must start the right route
        left = left_route[::-1] if left_route[-1] != i else list(left_route)
        right = right_route[::-1] if right_route[0] != j else list(right_route)
        new_route = left + right

        new_distance = route_distance([DEPOT] + new_route + [DEPOT], d)
        if new_distance > distance_limit:
            rejected += 1
            logger.debug(f"Rejected merge ({i}, {j}): distance {new_distance} above {distance_limit:.2f}")
            continue

        for endpoint in (left_route[0], left_route[-1], right_route[0], right_route[-1]):
            routes.pop(endpoint, None)
            route_demands.pop(endpoint, None)

        start, end = new_route[0], new_route[-1]
        routes[start] = new_route
        routes[end] = new_route
        route_demands[start] = merged_demand
        route_demands[end] = merged_demand
        merges += 1

    final_routes = [
        [DEPOT] + route + [DEPOT]
        for key, route in sorted(routes.items())
        if route[0] == key
    ]
    if not final_routes:
        final_routes = [[DEPOT, DEPOT]]

    logger.info(f"Savings merge: {merges} merges accepted, {rejected} rejected by distance bound, "
                f"{len(final_routes)} routes")
    return CVRPSolution(problem, final_routes)
