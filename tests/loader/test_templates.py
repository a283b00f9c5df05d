"""Tests for template substitution in loaded configuration."""

from pathlib import Path

import pytest

from docforge.core.config import State
from docforge.core.yaml_settings import YamlWithIncludesSettingsSource


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


def test_config_reference_substituted(fixtures_dir, mock_argv):
    """{config.build.label} resolves against the loaded config."""
    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(fixtures_dir / "minimal.yaml")
    )
    data = source()
    assert "{config.build.label}" in str(data)

    state = State(**data)

    assert state.config.build.output_dir == Path("cv-output")


def test_platformdirs_substituted(mock_argv):
    """Default log_root comes from {platformdirs.user_state_dir}."""
    state = State()

    assert "{" not in str(state.config.log_root)
    assert "docforge" in str(state.config.log_root)


def test_home_substituted_in_search_paths(mock_argv):
    state = State()

    for path in state.config.build.search_paths:
        assert "{" not in str(path)
    assert any(
        str(path).startswith(str(Path.home()))
        for path in state.config.build.search_paths
    )


def test_runtime_templates_preserved(fixtures_dir, mock_argv):
    """{packages} is filled in by the installer, not the loader."""
    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(fixtures_dir / "with_include.yaml")
    )
    state = State(**source())

    assert "{packages}" in state.config.commands["apt"]["install"]


def test_log_format_template_preserved(mock_argv):
    state = State()

    assert "{message}" in state.config.logger.file.format_template


def test_unknown_template_left_alone(mock_argv):
    state = State(config={"build": {"label": "{nothing.here}"}})

    assert state.config.build.label == "{nothing.here}"
