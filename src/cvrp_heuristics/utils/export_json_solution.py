"""
Export Route Plan as JSON
=========================

This module exports solved CVRP route plans as structured JSON files.

Features:
- Per-route node sequence, load and distance
- Plan summary (total distance, distance bound, gap, feasibility)
- Solver statistics passthrough
- Constraint violation reporting for debugging

Usage:
    result_file, data = export_json_solution(problem, solution, filename="plan.json")
"""

import os
import json
import logging
from datetime import datetime

logger = logging.getLogger(__name__)

def _to_builtin(value):
    """Convert numpy scalars (and containers of them) to JSON-serialisable types."""
    if isinstance(value, dict):
        return {key: _to_builtin(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_builtin(item) for item in value]
    if hasattr(value, "item"):
        return value.item()
    return value

def export_json_solution(problem, solution, stats=None, strategy=None, filename=None):
    """
    Export a route plan as a detailed JSON file.

    The JSON structure includes:
    - Summary (strategy, total distance, bound, gap, number of routes, feasibility)
    - One entry per route with its nodes, load and distance
    - Solver statistics, if given
    - Constraint violations (if any)

    Args:
        problem: CVRPProblem instance
        solution: CVRPSolution instance, or None when no plan was found
        stats: Statistics dictionary from a controller run (optional)
        strategy: Name of the strategy that produced the plan (optional)
        filename: Path to the output JSON file (optional, auto-generated if None)

    Returns:
        tuple: (path to the exported JSON file, exported dictionary)
    """
    if filename is None:
        os.makedirs("results", exist_ok=True)
        filename = f"results/cvrp_solution_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

    data = {
        "summary": {
            "strategy": strategy,
            "num_customers": problem.num_nodes - 1,
            "capacity": problem.capacity,
            "max_total_distance": problem.max_total_distance,
            "solution_found": solution is not None,
        },
        "routes": [],
        "stats": stats or {},
    }

    if solution is not None:
        evaluation = solution.evaluate()
        bound = float(problem.max_total_distance)
        data["summary"].update({
            "total_distance": evaluation["total_distance"],
            "num_routes": evaluation["num_routes"],
            "is_feasible": evaluation["is_feasible"],
            "gap": (evaluation["total_distance"] - bound) / bound if bound > 0 else None,
        })
        for idx, route in enumerate(solution.routes):
            data["routes"].append({
                "vehicle": idx + 1,
                "nodes": list(route),
                "load": evaluation["route_loads"][idx],
                "distance": evaluation["route_distances"][idx],
            })
        if evaluation["violations"]:
            data["violations"] = evaluation["violations"]

    data = _to_builtin(data)

    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)

    logger.info(f"Route plan exported to {filename}")
    return filename, data
