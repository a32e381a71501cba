import json

import pytest

from cvrp_heuristics.main import main, run
from cvrp_heuristics.problem.cvrp_problem import CVRPInputError
from cvrp_heuristics.solvers.cvrp_solution import CVRPSolution
from cvrp_heuristics.utils.export_json_solution import export_json_solution

from conftest import FIVE_NODE_MATRIX


def write_instance(path, demands=(0, 25, 30, 40, 50), max_total_distance=140, **extra):
    data = {
        "distance_matrix": FIVE_NODE_MATRIX,
        "demands": list(demands),
        "capacity": 100,
        "max_total_distance": max_total_distance,
    }
    data.update(extra)
    path.write_text(json.dumps(data))
    return str(path)


def test_export_solved_plan(tmp_path, five_node_problem):
    solution = CVRPSolution(five_node_problem, [[0, 1, 2, 0], [0, 3, 4, 0]])
    target = tmp_path / "out" / "plan.json"

    filename, data = export_json_solution(
        five_node_problem, solution, stats={"iterations": 1}, strategy="iterative", filename=str(target)
    )

    assert filename == str(target)
    assert json.loads(target.read_text()) == data
    summary = data["summary"]
    assert summary["solution_found"] is True
    assert summary["total_distance"] == 125
    assert summary["num_routes"] == 2
    assert summary["is_feasible"] is True
    assert summary["gap"] == pytest.approx(-15 / 140)
    assert data["routes"][1] == {"vehicle": 2, "nodes": [0, 3, 4, 0], "load": 90, "distance": 80}
    assert data["stats"] == {"iterations": 1}
    assert "violations" not in data


def test_export_without_solution(tmp_path, five_node_problem):
    _, data = export_json_solution(five_node_problem, None, filename=str(tmp_path / "none.json"))

    assert data["summary"]["solution_found"] is False
    assert data["routes"] == []


def test_export_reports_violations(tmp_path, five_node_problem):
    solution = CVRPSolution(five_node_problem, [[0, 1, 2, 0], [0, 3, 0]])
    _, data = export_json_solution(five_node_problem, solution, filename=str(tmp_path / "bad.json"))

    assert data["summary"]["is_feasible"] is False
    assert data["violations"] == [{"type": "unvisited_customers", "nodes": [4]}]


def test_run_solves_and_exports(tmp_path):
    instance = write_instance(tmp_path / "instance.json")
    output = tmp_path / "plan.json"

    solution = run(instance, strategy="iterative", output=str(output))

    assert solution.total_distance() == 125
    assert json.loads(output.read_text())["summary"]["strategy"] == "iterative"


def test_run_rejects_malformed_instance(tmp_path):
    instance = write_instance(tmp_path / "instance.json", demands=(0, 25, 30, 40, 150))
    with pytest.raises(CVRPInputError):
        run(instance, strategy="savings", output=str(tmp_path / "plan.json"))


def test_cli_success(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    instance = write_instance(tmp_path / "instance.json")

    code = main(["--instance", instance, "--strategy", "savings", "--output", "plan.json"])

    assert code == 0
    data = json.loads((tmp_path / "plan.json").read_text())
    assert data["summary"]["solution_found"] is True


def test_cli_no_solution_still_succeeds(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    instance = write_instance(tmp_path / "instance.json", max_total_distance=100)

    code = main(["--instance", instance, "--strategy", "iterative", "--output", "plan.json"])

    assert code == 0
    data = json.loads((tmp_path / "plan.json").read_text())
    assert data["summary"]["solution_found"] is False


def test_cli_invalid_instance(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    instance = write_instance(tmp_path / "instance.json", demands=(0, 25, 30, 40, 150))

    assert main(["--instance", instance, "--strategy", "savings"]) == 2


def test_cli_missing_instance(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["--instance", str(tmp_path / "absent.json")]) == 1


def test_cli_exports_solver_stats(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    instance = write_instance(tmp_path / "instance.json")

    code = main(["--instance", instance, "--strategy", "iterative", "--output", "plan.json"])

    assert code == 0
    stats = json.loads((tmp_path / "plan.json").read_text())["stats"]
    assert stats["iterations"] == 1
    assert stats["target_met"] is True
    assert stats["best_distance"] == 125


def test_cli_unparseable_instance(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    instance = tmp_path / "instance.json"
    instance.write_text("{not json")

    assert main(["--instance", str(instance), "--strategy", "savings"]) == 2
