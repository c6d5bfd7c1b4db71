from __future__ import annotations

from stem_quiz.core import workspace as workspace_mod
from stem_quiz.workspace import cli


def test_init_creates_workspace(tmp_path, capsys, monkeypatch):
    target = tmp_path / "workspace"
    monkeypatch.setenv("STEM_QUIZ_DATA_HOME", str(target))

    code = cli.main([])

    captured = capsys.readouterr()
    assert code == 0
    assert f"Workspace ready at {target} (created)" in captured.out
    assert "results" in captured.out
    assert target.is_dir()


def test_init_reports_existing_directories(tmp_path, capsys):
    target = tmp_path / "custom"
    cli.main(["--path", str(target), "--quiet"])

    code = cli.main(["--path", str(target)])

    captured = capsys.readouterr()
    assert code == 0
    assert "(created)" not in captured.out
    assert captured.out.count("(exists)") == 4


def test_init_quiet_mode(tmp_path, capsys, monkeypatch):
    target = tmp_path / "quiet"
    monkeypatch.setenv("STEM_QUIZ_DATA_HOME", str(target))

    code = cli.main(["--quiet"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == ""


def test_init_reports_workspace_error(tmp_path, capsys, monkeypatch):
    def boom(**_kwargs):
        raise workspace_mod.WorkspaceError("workspace boom")

    monkeypatch.setattr(cli.workspace_mod, "ensure_workspace", boom)

    code = cli.main(["--path", str(tmp_path)])

    assert code == 1
    assert "workspace boom" in capsys.readouterr().err
