"""Installer strategies, one per package manager."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from docforge.core.errors import InstallError, UnsupportedPlatformError
from docforge.core.log import logger
from docforge.core.runner import Runner
from docforge.install.detect import PackageManager


class InstallProfile(str, Enum):
    """How much of the TeX distribution to install."""

    BASIC = "basic"
    RECOMMENDED = "recommended"
    FULL = "full"
    CUSTOM = "custom"


class InstallerStrategy(ABC):
    """Installs a LaTeX distribution through one package manager.

    Subclasses declare the package sets they offer per profile. A
    profile a manager does not offer falls back to default_profile.
    Command templates can be overridden from config (keys `update`
    and `install`, with `{packages}` in the latter).
    """

    default_profile = InstallProfile.RECOMMENDED
    profiles: dict[InstallProfile, list[str]] = {}
    update_command: str | None = None
    install_command: str = ""
    privileged = True

    def __init__(
        self,
        sudo: bool = True,
        templates: dict[str, str] | None = None,
    ):
        self.sudo = sudo and self.privileged
        templates = templates or {}
        self.update_command = templates.get("update", self.update_command)
        self.install_command = templates.get(
            "install", self.install_command
        )

    @property
    @abstractmethod
    def manager(self) -> PackageManager:
        """Package manager this strategy drives."""

    @property
    def name(self) -> str:
        return self.manager.value

    def resolve_profile(self, profile: InstallProfile) -> InstallProfile:
        return profile if profile in self.profiles else self.default_profile

    def packages(self, profile: InstallProfile) -> list[str]:
        return list(self.profiles[self.resolve_profile(profile)])

    def _privileged(self, command: str) -> str:
        return f"sudo {command}" if self.sudo else command

    def install_commands(self, profile: InstallProfile) -> list[str]:
        """Shell commands that install the given profile, in order."""
        commands = []
        if self.update_command:
            commands.append(self._privileged(self.update_command))
        commands.append(self._privileged(
            self.install_command.format(
                packages=" ".join(self.packages(profile))
            )
        ))
        return commands

    def install(self, runner: Runner, profile: InstallProfile) -> None:
        """Run install_commands(profile), stopping at the first failure.

        Raises:
            InstallError: If a command exits non-zero
        """
        resolved = self.resolve_profile(profile)
        if resolved != profile:
            logger.warning(
                f"{self.name} has no '{profile.value}' profile; "
                f"installing '{resolved.value}'"
            )

        for command in self.install_commands(resolved):
            with logger.span(f"Installing via {self.name}", command=command):
                result = runner.execute(
                    command, check=False, log_level="debug"
                )
            if result.exited != 0:
                raise InstallError(
                    command, result.exited, result.stderr or result.stdout
                )


class AptInstaller(InstallerStrategy):
    """Debian and Ubuntu."""

    update_command = "apt-get update"
    install_command = "apt-get install -y {packages}"
    profiles = {
        InstallProfile.BASIC: [
            "texlive-latex-base", "texlive-fonts-recommended",
        ],
        InstallProfile.RECOMMENDED: [
            "texlive-latex-recommended", "texlive-fonts-extra",
            "texlive-latex-extra",
        ],
        InstallProfile.FULL: ["texlive-full"],
        InstallProfile.CUSTOM: [
            "texlive-latex-base", "texlive-latex-extra",
            "texlive-fonts-recommended", "texlive-fonts-extra",
            "texlive-pictures",
        ],
    }

    @property
    def manager(self) -> PackageManager:
        return PackageManager.APT


class DnfInstaller(InstallerStrategy):
    """Fedora, and RHEL/CentOS 8+."""

    install_command = "dnf install -y {packages}"
    profiles = {
        InstallProfile.BASIC: ["texlive-scheme-basic"],
        InstallProfile.RECOMMENDED: [
            "texlive-scheme-medium", "texlive-collection-latexextra",
        ],
        InstallProfile.FULL: ["texlive-scheme-full"],
    }

    @property
    def manager(self) -> PackageManager:
        return PackageManager.DNF


class YumInstaller(InstallerStrategy):
    """Older RHEL/CentOS."""

    install_command = "yum install -y {packages}"
    profiles = {
        InstallProfile.RECOMMENDED: [
            "texlive", "texlive-latex",
            "texlive-collection-fontsrecommended",
        ],
    }

    @property
    def manager(self) -> PackageManager:
        return PackageManager.YUM


class PacmanInstaller(InstallerStrategy):
    """Arch Linux."""

    install_command = "pacman -S --noconfirm {packages}"
    profiles = {
        InstallProfile.BASIC: ["texlive-core"],
        InstallProfile.RECOMMENDED: ["texlive-most"],
        InstallProfile.FULL: ["texlive-most", "texlive-lang"],
    }

    @property
    def manager(self) -> PackageManager:
        return PackageManager.PACMAN


class ZypperInstaller(InstallerStrategy):
    """openSUSE."""

    install_command = "zypper install -y {packages}"
    profiles = {
        InstallProfile.RECOMMENDED: [
            "texlive", "texlive-latex", "texlive-metapost",
        ],
    }

    @property
    def manager(self) -> PackageManager:
        return PackageManager.ZYPPER


class HomebrewInstaller(InstallerStrategy):
    """macOS via Homebrew casks.

    BasicTeX ships without most collections, so the basic profile
    follows up with tlmgr.
    """

    default_profile = InstallProfile.BASIC
    install_command = "brew install --cask {packages}"
    privileged = False
    profiles = {
        InstallProfile.BASIC: ["basictex"],
        InstallProfile.FULL: ["mactex"],
    }
    basictex_followup = (
        "tlmgr update --self",
        "tlmgr install collection-fontsrecommended collection-latexextra",
    )

    def __init__(
        self,
        sudo: bool = True,
        templates: dict[str, str] | None = None,
    ):
        super().__init__(sudo, templates)
        # brew refuses root, but tlmgr writes into /usr/local/texlive
        self.tlmgr_sudo = sudo

    @property
    def manager(self) -> PackageManager:
        return PackageManager.HOMEBREW

    def install_commands(self, profile: InstallProfile) -> list[str]:
        commands = super().install_commands(profile)
        if self.resolve_profile(profile) == InstallProfile.BASIC:
            commands.extend(
                f"sudo {command}" if self.tlmgr_sudo else command
                for command in self.basictex_followup
            )
        return commands


class WingetInstaller(InstallerStrategy):
    """Windows via winget; installs MiKTeX, which fetches packages on
    demand."""

    install_command = (
        "winget install --exact --id {packages} "
        "--accept-source-agreements --accept-package-agreements"
    )
    privileged = False
    profiles = {
        InstallProfile.RECOMMENDED: ["MiKTeX.MiKTeX"],
    }

    @property
    def manager(self) -> PackageManager:
        return PackageManager.WINGET

    def install_commands(self, profile: InstallProfile) -> list[str]:
        # winget takes a single --id per invocation
        return [
            self.install_command.format(packages=package)
            for package in self.packages(profile)
        ]


STRATEGIES: dict[PackageManager, type[InstallerStrategy]] = {
    PackageManager.APT: AptInstaller,
    PackageManager.DNF: DnfInstaller,
    PackageManager.YUM: YumInstaller,
    PackageManager.PACMAN: PacmanInstaller,
    PackageManager.ZYPPER: ZypperInstaller,
    PackageManager.HOMEBREW: HomebrewInstaller,
    PackageManager.WINGET: WingetInstaller,
}


def select_strategy(
    manager: PackageManager,
    sudo: bool = True,
    templates: dict[str, str] | None = None,
    platform: str = "",
) -> InstallerStrategy:
    """Instantiate the strategy for a detected package manager.

    Raises:
        UnsupportedPlatformError: For NONE and UNKNOWN
    """
    strategy_cls = STRATEGIES.get(manager)
    if strategy_cls is None:
        raise UnsupportedPlatformError(platform or manager.value)
    return strategy_cls(sudo=sudo, templates=templates)
