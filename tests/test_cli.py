import pytest

import iqfit
from iqfit.solutions import OutputWriteError, SolutionSet
from iqfit.solver import solver
from iqfit.solver.config import config as solver_config


def test_main_passes_worker_count(monkeypatch):
    calls = []
    monkeypatch.setattr(iqfit, "argv", ["iqfit", "4"])
    monkeypatch.setattr(solver, "run", lambda **kw: calls.append(kw))
    iqfit.main()
    assert calls == [{"n_workers": 4}]


def test_main_defaults_to_configured_workers(monkeypatch):
    calls = []
    monkeypatch.setattr(iqfit, "argv", ["iqfit"])
    monkeypatch.setattr(solver, "run", lambda **kw: calls.append(kw))
    iqfit.main()
    assert calls == [{"n_workers": None}]


@pytest.mark.parametrize("argv", [["iqfit", "zero"], ["iqfit", "0"], ["iqfit", "1", "2"]])
def test_main_rejects_bad_arguments(monkeypatch, argv):
    monkeypatch.setattr(iqfit, "argv", argv)
    with pytest.raises(SystemExit) as exc:
        iqfit.main()
    assert exc.value.code == 1


def test_main_exits_with_distinct_status_on_output_failure(monkeypatch, capsys):
    def _run(**kw):
        raise OutputWriteError("Could not write solutions to /nope")

    monkeypatch.setattr(iqfit, "argv", ["iqfit", "1"])
    monkeypatch.setattr(solver, "run", _run)
    with pytest.raises(SystemExit) as exc:
        iqfit.main()
    assert exc.value.code == 2
    assert "Could not write" in capsys.readouterr().err


def test_run_writes_solutions_and_summary(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(solver_config, "output_path", str(tmp_path / "solutions.txt"))
    monkeypatch.setattr(solver_config, "log_dir", str(tmp_path / "logs"))

    def _solve(*, n_workers, logf, max_processes=None):
        return SolutionSet(
            counts=(1,), displacements=(0,), buffer=b"AABABB", record_size=6, width=3
        )

    monkeypatch.setattr(solver, "solve", _solve)
    summary = solver.run(n_workers=2)

    assert summary.total_solutions == 1
    assert summary.n_workers == 2
    assert (tmp_path / "solutions.txt").read_text(encoding="utf-8") == "AAB\nABB\n\n"
    out = capsys.readouterr().out
    assert "Total solutions: 1" in out
    assert "Elapsed time:" in out
    assert list((tmp_path / "logs").glob("iqfit-*-2w.log"))


def test_run_raises_after_summary_when_output_unwritable(monkeypatch, tmp_path, capsys):
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    monkeypatch.setattr(solver_config, "output_path", str(blocked))
    monkeypatch.setattr(solver_config, "log_dir", str(tmp_path / "logs"))
    monkeypatch.setattr(
        solver,
        "solve",
        lambda **kw: SolutionSet(
            counts=(0,), displacements=(0,), buffer=b"", record_size=55, width=11
        ),
    )

    with pytest.raises(OutputWriteError):
        solver.run(n_workers=1)
    assert "Total solutions: 0" in capsys.readouterr().out
