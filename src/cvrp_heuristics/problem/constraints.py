import logging

logger = logging.getLogger(__name__)

class RouteValidator:
    """
    Independent verification of CVRP route plans.

    Every check re-derives the invariants from the raw routes and the problem,
    without trusting anything a solver recorded about its own candidate.
    """
    @staticmethod
    def validate_anchoring(problem, routes):
        """
        Validate that every route starts and ends at the depot and never
        visits it in between.

        Args:
            problem: CVRPProblem instance
            routes: List of depot-bracketed routes

        Returns:
            list: List of anchoring violations
        """
        violations = []

        for idx, route in enumerate(routes):
            if len(route) < 2 or route[0] != problem.DEPOT or route[-1] != problem.DEPOT:
                violations.append({
                    "type": "depot_anchor_violation",
                    "route": idx,
                    "nodes": list(route)
                })
                continue

            interior_depots = [pos for pos in range(1, len(route) - 1) if route[pos] == problem.DEPOT]
            if interior_depots:
                violations.append({
                    "type": "interior_depot_violation",
                    "route": idx,
                    "positions": interior_depots
                })

        return violations

    @staticmethod
    def validate_capacity(problem, routes):
        """
        Validate the capacity constraint of every route.

        Args:
            problem: CVRPProblem instance
            routes: List of depot-bracketed routes

        Returns:
            list: List of capacity violations
        """
        violations = []

        for idx, route in enumerate(routes):
            load = int(sum(problem.demands[node] for node in route))
            if load > problem.capacity:
                violations.append({
                    "type": "capacity_violation",
                    "route": idx,
                    "load": load,
                    "capacity": problem.capacity
                })

        return violations

    @staticmethod
    def validate_coverage(problem, routes):
        """
        Validate that every customer is visited exactly once.

        Args:
            problem: CVRPProblem instance
            routes: List of depot-bracketed routes

        Returns:
            list: List of coverage violations (missing, repeated or unknown nodes)
        """
        violations = []
        visits = {}

        for route in routes:
            for node in route[1:-1]:
                if node == problem.DEPOT:
                    continue
                visits[node] = visits.get(node, 0) + 1

        customers = set(problem.customers())

        missing = sorted(customers - set(visits))
        if missing:
            violations.append({"type": "unvisited_customers", "nodes": missing})

        repeated = sorted(node for node, count in visits.items() if count > 1)
        if repeated:
            violations.append({"type": "repeated_customers", "nodes": repeated})

        unknown = sorted(set(visits) - customers)
        if unknown:
            violations.append({"type": "unknown_nodes", "nodes": unknown})

        return violations

    @staticmethod
    def verify_solution(problem, solution):
        """
        Run every check against a solution.

        Args:
            problem: CVRPProblem instance
            solution: CVRPSolution (or anything with a ``routes`` attribute)

        Returns:
            list: All violations found; empty when the plan is valid
        """
        routes = solution.routes
        violations = []
        violations.extend(RouteValidator.validate_anchoring(problem, routes))
        violations.extend(RouteValidator.validate_capacity(problem, routes))
        violations.extend(RouteValidator.validate_coverage(problem, routes))

        for violation in violations:
            logger.debug(f"Route plan violation: {violation}")

        return violations

    @staticmethod
    def baseline_gap(problem, solution):
        """Relative gap of the solution distance over the instance's distance bound."""
        bound = float(problem.max_total_distance)
        if bound <= 0:
            return float("inf")
        return (solution.total_distance() - bound) / bound
