"""
Local Search Operators for the CVRP
===================================

This module implements the improvement moves used by the metaheuristic
controllers. Each operator mutates a CVRPSolution in place, keeps it feasible,
and returns the distance change it applied (0 when the solution is unchanged).

Operators:
- two_opt: reverse route segments until no reversal shortens any route
- relocate: move the single best customer into another route
- swap: exchange the single best pair of customers

relocate and swap apply one move per call; controllers that want convergence
call them repeatedly, interleaved with two_opt.
"""

import logging
import numpy as np

logger = logging.getLogger(__name__)

class CVRPOperators:
    """
    Collection of local search operators bound to one problem instance.

    Attributes:
        distance_matrix (np.ndarray): Edge costs of the problem
        demands (np.ndarray): Demand per node
        capacity (int): Vehicle capacity
        symmetric (bool): Whether d[a, b] == d[b, a] for every pair
    """

    def __init__(self, problem):
        self.problem = problem
        self.distance_matrix = problem.distance_matrix
        self.demands = problem.demands
        self.capacity = problem.capacity
        self.symmetric = bool(np.array_equal(self.distance_matrix, self.distance_matrix.T))

    def _route_load(self, route):
        return int(sum(self.demands[node] for node in route))

    #----------------
    # 2-opt
    #----------------

    def two_opt_delta(self, route, i, j):
        """
        Distance change of reversing ``route[i..j]`` (inclusive).

        On a symmetric matrix only the two boundary edges change. Otherwise
        every edge inside the segment is traversed in the opposite direction
        and its cost difference is added as well.
        """
        d = self.distance_matrix
        delta = (
            d[route[i - 1], route[j]] + d[route[i], route[j + 1]]
            - d[route[i - 1], route[i]] - d[route[j], route[j + 1]]
        )

        if not self.symmetric:
            segment = np.asarray(route[i:j + 1], dtype=np.intp)
            delta += (d[segment[1:], segment[:-1]] - d[segment[:-1], segment[1:]]).sum()

        return int(delta)

    def two_opt_route(self, route):
        """
        Apply improving segment reversals to one route until a full scan
        finds none.

        Args:
            route (list): Depot-bracketed route, modified in place

        Returns:
            int: Total distance change (<= 0)
        """
        total_delta = 0
        improved = True

        while improved:
            improved = False
            for i in range(1, len(route) - 2):
                for j in range(i + 2, len(route) - 1):
                    delta = self.two_opt_delta(route, i, j)
                    if delta < 0:
                        route[i:j + 1] = route[i:j + 1][::-1]
                        total_delta += delta
                        improved = True

        return total_delta

    def two_opt(self, solution):
        """
        Run 2-opt to a local fixed point on every route of the solution.

        Route membership and loads never change.

        Args:
            solution: CVRPSolution to improve in place

        Returns:
            int: Total distance change (<= 0)
        """
        total_delta = 0
        for route in solution.routes:
            total_delta += self.two_opt_route(route)

        if total_delta:
            logger.debug(f"2-opt improved distance by {-total_delta}")
        return total_delta

    #----------------
    # Relocate
    #----------------

    def relocate(self, solution):
        """
        Move the single customer whose relocation to another route saves the
        most distance.

        Every interior node is tried at every insertion position of every
        other route with enough spare capacity. Only the best move is applied;
        a source route left without customers is dropped.

        Args:
            solution: CVRPSolution to improve in place

        Returns:
            int: Distance change of the applied move, 0 if none improves
        """
        d = self.distance_matrix
        routes = solution.routes
        loads = [self._route_load(route) for route in routes]

        best_delta = 0
        best_move = None

        for from_idx, route in enumerate(routes):
            for i in range(1, len(route) - 1):
                node = route[i]
                prev_node, next_node = route[i - 1], route[i + 1]
                removal_delta = d[prev_node, next_node] - d[prev_node, node] - d[node, next_node]

                for to_idx, target in enumerate(routes):
                    if to_idx == from_idx:
                        continue
                    if loads[to_idx] + self.demands[node] > self.capacity:
                        continue

                    for j in range(1, len(target)):
                        insertion_delta = d[target[j - 1], node] + d[node, target[j]] - d[target[j - 1], target[j]]
                        delta = int(removal_delta + insertion_delta)
                        if delta < best_delta:
                            best_delta = delta
                            best_move = (from_idx, i, to_idx, j)

        if best_move is None:
            return 0

        from_idx, i, to_idx, j = best_move
        node = routes[from_idx].pop(i)
        routes[to_idx].insert(j, node)
        logger.debug(f"Relocated node {node} from route {from_idx} to route {to_idx} (delta {best_delta})")

        if len(routes[from_idx]) <= 2:
            solution.remove_empty_routes()

        return best_delta

    #----------------
    # Swap
    #----------------

    def swap_delta(self, route1, i, route2, j, same_route):
        """
        Distance change of exchanging ``route1[i]`` and ``route2[j]``.

        Args:
            same_route (bool): Whether both positions lie in one route (i < j)
        """
        d = self.distance_matrix
        node1, node2 = route1[i], route2[j]

        if same_route and j == i + 1:
            # Adjacent positions share the edge between them
            prev_node, next_node = route1[i - 1], route1[j + 1]
            return int(
                d[prev_node, node2] + d[node2, node1] + d[node1, next_node]
                - d[prev_node, node1] - d[node1, node2] - d[node2, next_node]
            )

        return int(
            d[route1[i - 1], node2] + d[node2, route1[i + 1]]
            - d[route1[i - 1], node1] - d[node1, route1[i + 1]]
            + d[route2[j - 1], node1] + d[node1, route2[j + 1]]
            - d[route2[j - 1], node2] - d[node2, route2[j + 1]]
        )

    def swap(self, solution):
        """
        Exchange the single pair of customers that saves the most distance.

        Pairs may come from the same route or from two routes; cross-route
        pairs whose exchanged demands overflow either route are skipped.

        Args:
            solution: CVRPSolution to improve in place

        Returns:
            int: Distance change of the applied move, 0 if none improves
        """
        routes = solution.routes
        loads = [self._route_load(route) for route in routes]

        best_delta = 0
        best_move = None

        for idx1, route1 in enumerate(routes):
            for i in range(1, len(route1) - 1):
                node1 = route1[i]
                for idx2 in range(idx1, len(routes)):
                    route2 = routes[idx2]
                    same_route = idx1 == idx2
                    start = i + 1 if same_route else 1

                    for j in range(start, len(route2) - 1):
                        node2 = route2[j]

                        if not same_route:
                            shift = self.demands[node2] - self.demands[node1]
                            if loads[idx1] + shift > self.capacity or loads[idx2] - shift > self.capacity:
                                continue

                        delta = self.swap_delta(route1, i, route2, j, same_route)
                        if delta < best_delta:
                            best_delta = delta
                            best_move = (idx1, i, idx2, j)

        if best_move is None:
            return 0

        idx1, i, idx2, j = best_move
        node1, node2 = routes[idx1][i], routes[idx2][j]
        routes[idx1][i], routes[idx2][j] = node2, node1
        logger.debug(f"Swapped node {node1} (route {idx1}) with node {node2} (route {idx2}) (delta {best_delta})")

        return best_delta
