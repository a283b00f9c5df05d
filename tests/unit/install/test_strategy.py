"""Tests for installer strategies."""

from unittest.mock import Mock

import pytest

from docforge.core.errors import InstallError, UnsupportedPlatformError
from docforge.install.detect import PackageManager
from docforge.install.strategy import (
    STRATEGIES,
    AptInstaller,
    HomebrewInstaller,
    InstallProfile,
    WingetInstaller,
    YumInstaller,
    select_strategy,
)


def runner_with_exits(*codes):
    runner = Mock()
    runner.execute.side_effect = [
        Mock(exited=code, stdout="", stderr="E: failed" if code else "")
        for code in codes
    ]
    return runner


def test_every_real_manager_has_a_strategy():
    for manager in PackageManager:
        if manager in (PackageManager.NONE, PackageManager.UNKNOWN):
            continue
        strategy = select_strategy(manager)
        assert strategy.manager == manager
        assert strategy.default_profile in strategy.profiles


@pytest.mark.parametrize("manager", [
    PackageManager.NONE, PackageManager.UNKNOWN,
])
def test_unsupported(manager):
    with pytest.raises(UnsupportedPlatformError) as exc_info:
        select_strategy(manager, platform="Plan9")

    assert "Plan9" in str(exc_info.value)
    assert "tug.org" in exc_info.value.remediation


def test_apt_commands():
    commands = AptInstaller().install_commands(InstallProfile.RECOMMENDED)

    assert commands == [
        "sudo apt-get update",
        "sudo apt-get install -y texlive-latex-recommended "
        "texlive-fonts-extra texlive-latex-extra",
    ]


def test_apt_without_sudo():
    commands = AptInstaller(sudo=False).install_commands(InstallProfile.FULL)

    assert commands == ["apt-get update", "apt-get install -y texlive-full"]


def test_profile_fallback():
    """A profile the manager lacks falls back to its default."""
    yum = YumInstaller()

    assert yum.resolve_profile(InstallProfile.FULL) == (
        InstallProfile.RECOMMENDED
    )
    assert yum.packages(InstallProfile.BASIC) == yum.packages(
        InstallProfile.RECOMMENDED
    )


def test_homebrew_basic_follows_up_with_tlmgr():
    commands = HomebrewInstaller().install_commands(InstallProfile.BASIC)

    assert commands[0] == "brew install --cask basictex"
    assert commands[1] == "sudo tlmgr update --self"
    assert commands[2].startswith("sudo tlmgr install")


def test_homebrew_full_is_mactex():
    commands = HomebrewInstaller(sudo=False).install_commands(
        InstallProfile.FULL
    )

    assert commands == ["brew install --cask mactex"]


def test_homebrew_defaults_to_basic():
    brew = HomebrewInstaller()

    assert brew.resolve_profile(InstallProfile.RECOMMENDED) == (
        InstallProfile.BASIC
    )


def test_winget_one_id_per_command():
    commands = WingetInstaller().install_commands(InstallProfile.BASIC)

    assert len(commands) == 1
    assert "--id MiKTeX.MiKTeX" in commands[0]
    assert not commands[0].startswith("sudo")


def test_command_templates_override():
    apt = select_strategy(
        PackageManager.APT,
        sudo=False,
        templates={"install": "apt-get install -q -y {packages}"},
    )

    commands = apt.install_commands(InstallProfile.FULL)

    assert commands[-1] == "apt-get install -q -y texlive-full"
    assert commands[0] == "apt-get update"


def test_install_runs_every_command():
    runner = runner_with_exits(0, 0)

    AptInstaller().install(runner, InstallProfile.BASIC)

    assert runner.execute.call_count == 2


def test_install_stops_at_first_failure():
    runner = runner_with_exits(100, 0)

    with pytest.raises(InstallError) as exc_info:
        AptInstaller().install(runner, InstallProfile.BASIC)

    assert runner.execute.call_count == 1
    assert exc_info.value.command == "sudo apt-get update"
    assert exc_info.value.command_exit_code == 100
    assert exc_info.value.output == "E: failed"


def test_strategies_cover_detected_managers():
    assert set(STRATEGIES) == set(PackageManager) - {
        PackageManager.NONE, PackageManager.UNKNOWN
    }
