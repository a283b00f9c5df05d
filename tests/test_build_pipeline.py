"""End-to-end tests for the build workflow with a fake compiler."""

import asyncio
import re
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic_settings import CliApp

from docforge.command.build import BuildCommand
from docforge.core.config import State


@pytest.fixture
def state(mock_argv):
    state = State()
    state.config.build.search_paths = []
    state.config.build.label = "cv"
    return state


def run_build(state, document, **kwargs):
    command = BuildCommand(source=document, **kwargs)
    return asyncio.run(
        command.run_workflow(state, base_dir=document.parent)
    )


def workdir_contents(document):
    return sorted(p.name for p in document.parent.iterdir())


def test_successful_build(state, document, fake_tool):
    state.config.build.tool_path = fake_tool("ok")

    exit_code = run_build(state, document)

    build = state.runtime.build
    assert exit_code == 0
    assert build.status == "done"
    assert build.result.success
    assert len(build.result.attempts) == 1

    output = document.parent / "output"
    promoted = list(output.iterdir())
    assert len(promoted) == 1
    assert re.fullmatch(r"cv_\d{8}_\d{6}\.pdf", promoted[0].name)
    assert build.result.artifact_path == promoted[0]
    assert build.result.size_bytes == promoted[0].stat().st_size

    # Byproducts, the working PDF and attempt captures are gone
    assert workdir_contents(document) == ["main.tex", "output"]
    assert any("copied to" in m for m in build.reporter.messages("success"))


def test_second_attempt_succeeds(state, document, fake_tool):
    state.config.build.tool_path = fake_tool("second")

    exit_code = run_build(state, document)

    build = state.runtime.build
    assert exit_code == 0
    assert [a.artifact_present for a in build.result.attempts] == [
        False, True
    ]
    assert any(
        "trying again" in m for m in build.reporter.messages("warning")
    )


def test_nonzero_exit_with_pdf_warns(state, document, fake_tool):
    state.config.build.tool_path = fake_tool("warn")

    exit_code = run_build(state, document)

    assert exit_code == 0
    assert any(
        "exited with 1" in m
        for m in state.runtime.build.reporter.messages("warning")
    )


def test_tool_missing(state, document, tmp_path, monkeypatch):
    """Missing compiler: nothing runs, nothing is written."""
    monkeypatch.setenv("PATH", str(tmp_path / "nowhere"))
    state.config.build.tool = "no-such-latex"

    exit_code = run_build(state, document)

    build = state.runtime.build
    assert exit_code == 1
    assert build.attempts == []
    assert build.result is None
    assert not (document.parent / "output").exists()
    assert any(
        "docforge install" in m for m in build.reporter.messages("info")
    )


def test_source_missing(state, tmp_path, fake_tool):
    state.config.build.tool_path = fake_tool("ok")

    exit_code = run_build(state, tmp_path / "missing.tex")

    assert exit_code == 1
    assert state.runtime.build.attempts == []
    assert state.runtime.build.reporter.messages("error") == [
        f"Source not found: {tmp_path / 'missing.tex'} not found"
    ]


def test_output_dir_unusable(state, document, fake_tool):
    state.config.build.tool_path = fake_tool("ok")
    (document.parent / "output").write_text("in the way")

    exit_code = run_build(state, document)

    assert exit_code == 1
    assert state.runtime.build.attempts == []


def test_all_attempts_fail(state, document, fake_tool):
    """Both passes fail: log tail shown, byproducts still removed."""
    state.config.build.tool_path = fake_tool("fail")

    exit_code = run_build(state, document)

    build = state.runtime.build
    assert exit_code == 1
    assert build.status == "failed"
    assert not build.result.success
    assert build.result.artifact_path is None
    assert len(build.result.attempts) == 2

    assert list((document.parent / "output").iterdir()) == []
    assert workdir_contents(document) == ["main.tex", "output"]

    messages = build.reporter.messages()
    assert "Last 20 lines of log file:" in messages
    assert "log line 30" in messages
    assert "log line 10" not in messages


def test_promotion_failure_still_cleans(state, document, fake_tool):
    state.config.build.tool_path = fake_tool("ok")

    with patch(
        "docforge.build.promote.shutil.copyfile",
        side_effect=OSError(28, "No space left on device"),
    ):
        exit_code = run_build(state, document)

    build = state.runtime.build
    assert exit_code == 1
    assert not build.result.success
    assert workdir_contents(document) == ["main.tex", "output"]
    assert any(
        m.startswith("Promotion failed")
        for m in build.reporter.messages("error")
    )


def test_attempt_log_write_failure_still_cleans(state, document, fake_tool):
    """A full disk while capturing output is a compilation failure."""
    state.config.build.tool_path = fake_tool("ok")
    original_write_text = Path.write_text

    def write_text(path, *args, **kwargs):
        if path.name.startswith("attempt-"):
            raise OSError(28, "No space left on device")
        return original_write_text(path, *args, **kwargs)

    with patch.object(Path, "write_text", write_text):
        exit_code = run_build(state, document)

    build = state.runtime.build
    assert exit_code == 1
    assert build.status == "failed"
    assert not build.result.success
    assert workdir_contents(document) == ["main.tex", "output"]
    assert list((document.parent / "output").iterdir()) == []

    errors = build.reporter.messages("error")
    assert len(errors) == 1
    assert errors[0].startswith("Compilation failed")
    assert "No space left on device" in errors[0]
    assert any(
        "disk space" in m for m in build.reporter.messages("info")
    )


def test_custom_output_dir(state, document, fake_tool, tmp_path):
    state.config.build.tool_path = fake_tool("ok")

    exit_code = run_build(state, document, output_dir=tmp_path / "dist")

    assert exit_code == 0
    assert len(list((tmp_path / "dist").iterdir())) == 1


def test_open_output(state, document, fake_tool):
    state.config.build.tool_path = fake_tool("ok")
    state.config.build.open_output = True

    with patch("docforge.workflow.nodes.cleanup.open_directory") as opener:
        exit_code = run_build(state, document)

    assert exit_code == 0
    opener.assert_called_once()
    assert opener.call_args.args[1] == document.parent / "output"


def test_cli_build(mock_argv, document, fake_tool):
    """`docforge build` exits with the workflow's exit code."""
    from docforge.cli import CliState

    with pytest.raises(SystemExit) as exc_info:
        CliApp.run(CliState, cli_args=[
            "--config.build.tool_path", str(fake_tool("ok")),
            "build",
            "--source", str(document),
            "--output-dir", str(document.parent / "pdf"),
        ])

    assert exc_info.value.code == 0
    assert len(list((document.parent / "pdf").iterdir())) == 1
