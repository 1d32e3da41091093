"""Static registry of secret and vulnerability scanning tools.

Each tool is a plain data descriptor: its binary name, the scan commands it
runs (as argument templates), the install strategies to try and an optional
GitHub repository publishing binary releases. Adding a tool means adding a
descriptor to ``CATALOG``; nothing else dispatches on tool identity.

Every command template passes flags that force the tool into the shared
exit-code convention: 0 when clean, 1 when something was found.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple


class ScanScope(str, Enum):
    """Which tree a scan command targets."""

    HISTORY = "history"
    WORKTREE = "worktree"

    @property
    def label(self) -> str:
        return "git history" if self is ScanScope.HISTORY else "worktree snapshot"


@dataclass(frozen=True)
class CommandTemplate:
    """Argument template for one scan command.

    Placeholders expanded in ``args``: ``{repo}`` (repository root),
    ``{worktree}`` (snapshot root) and ``{repo_url}`` (file:// URL of the
    repository).

    Attributes:
        scope: Tree the command scans; also used in its label.
        args: Argument templates, excluding the binary itself.
        workdir: Tree used as the working directory.
    """

    scope: ScanScope
    args: Tuple[str, ...]
    workdir: ScanScope

    def render(self, values: Dict[str, str]) -> Tuple[str, ...]:
        return tuple(arg.format(**values) for arg in self.args)


@dataclass(frozen=True)
class ScanCommand:
    """A concrete scan invocation, built fresh for each run."""

    label: str
    args: Tuple[str, ...]
    workdir: Optional[Path] = None


@dataclass(frozen=True)
class InstallStrategy:
    """One way of installing a tool through a package manager.

    Attributes:
        label: Human-readable name (e.g. "brew", "go install").
        program: Package manager executable that must be on PATH.
        args: Arguments passed to ``program``.
        use_sudo: Whether the command needs elevated privileges.
    """

    label: str
    program: str
    args: Tuple[str, ...]
    use_sudo: bool = False

    def command(self, elevate_with: Optional[str] = None) -> List[str]:
        """Build the argument vector, optionally prefixed with an elevation wrapper."""
        cmd = [self.program, *self.args]
        if self.use_sudo and elevate_with:
            return [elevate_with, *cmd]
        return cmd


@dataclass(frozen=True)
class ScanTool:
    """Descriptor of a scanning tool.

    Attributes:
        name: Identifier used in configuration (e.g. "gitleaks").
        display_name: Human-readable name.
        binary_name: Executable name looked up on PATH.
        commands: Scan command templates, run in order.
        install_strategies: Package-manager installs, tried in order.
        release_repo: "owner/repo" publishing binary releases, if any.
    """

    name: str
    display_name: str
    binary_name: str
    commands: Tuple[CommandTemplate, ...]
    install_strategies: Tuple[InstallStrategy, ...]
    release_repo: Optional[str] = None

    def scan_commands(self, repo_root: Path, worktree_root: Path) -> List[ScanCommand]:
        """Build the concrete scan commands for a repository and its snapshot.

        Args:
            repo_root: Real repository root (history scans).
            worktree_root: Snapshot root (worktree scans).

        Returns:
            Scan commands in catalog order.
        """
        repo_path = _canonical(repo_root)
        worktree_path = _canonical(worktree_root)
        roots = {ScanScope.HISTORY: repo_path, ScanScope.WORKTREE: worktree_path}
        values = {
            "repo": str(repo_path),
            "worktree": str(worktree_path),
            "repo_url": _file_url(repo_path),
        }
        return [
            ScanCommand(
                label=f"{self.display_name} ({template.scope.label})",
                args=template.render(values),
                workdir=roots[template.workdir],
            )
            for template in self.commands
        ]


def _canonical(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path


def _file_url(path: Path) -> str:
    if path.is_absolute():
        return path.as_uri()
    return f"file://{path}"


def _history(*args: str) -> CommandTemplate:
    return CommandTemplate(ScanScope.HISTORY, tuple(args), ScanScope.HISTORY)


def _worktree(*args: str) -> CommandTemplate:
    return CommandTemplate(ScanScope.WORKTREE, tuple(args), ScanScope.WORKTREE)


def _os_packages(package: str) -> Tuple[InstallStrategy, ...]:
    return (
        InstallStrategy("brew", "brew", ("install", package)),
        InstallStrategy("apt-get", "apt-get", ("install", "-y", package), use_sudo=True),
        InstallStrategy("dnf", "dnf", ("install", "-y", package), use_sudo=True),
        InstallStrategy("pacman", "pacman", ("-S", "--noconfirm", package), use_sudo=True),
    )


GITLEAKS = ScanTool(
    name="gitleaks",
    display_name="Gitleaks",
    binary_name="gitleaks",
    commands=(
        _history(
            "detect", "--source", "{repo}",
            "--no-banner", "--redact", "--exit-code", "1",
        ),
        _worktree(
            "detect", "--source", "{worktree}", "--no-git",
            "--no-banner", "--redact", "--exit-code", "1",
        ),
    ),
    install_strategies=_os_packages("gitleaks") + (
        InstallStrategy("go install", "go", ("install", "github.com/gitleaks/gitleaks/v8@latest")),
    ),
    release_repo="gitleaks/gitleaks",
)

TRUFFLEHOG = ScanTool(
    name="trufflehog",
    display_name="TruffleHog",
    binary_name="trufflehog",
    commands=(
        _history("git", "{repo_url}", "--fail", "--json"),
        _worktree("filesystem", "{worktree}", "--fail", "--json"),
    ),
    install_strategies=_os_packages("trufflehog") + (
        InstallStrategy("go install", "go", ("install", "github.com/trufflesecurity/trufflehog@latest")),
    ),
    release_repo="trufflesecurity/trufflehog",
)

GIT_SECRETS = ScanTool(
    name="git-secrets",
    display_name="Git-Secrets",
    binary_name="git-secrets",
    commands=(
        _worktree("--scan", "-r"),
        _history("--scan-history"),
    ),
    install_strategies=_os_packages("git-secrets"),
)

TRIVY = ScanTool(
    name="trivy",
    display_name="Trivy",
    binary_name="trivy",
    commands=(
        _worktree(
            "fs", "--scanners", "secret,vuln,misconfig",
            "--exit-code", "1", "--skip-dirs", ".git", "--quiet", "{worktree}",
        ),
    ),
    install_strategies=_os_packages("trivy") + (
        InstallStrategy("go install", "go", ("install", "github.com/aquasecurity/trivy/cmd/trivy@latest")),
    ),
    release_repo="aquasecurity/trivy",
)

SEMGREP = ScanTool(
    name="semgrep",
    display_name="Semgrep",
    binary_name="semgrep",
    commands=(
        _worktree(
            "scan", "--config", "p/default", "--config", "p/secrets",
            "--error", "--metrics", "off", "--quiet", "--exclude", ".git", "{worktree}",
        ),
    ),
    install_strategies=(
        InstallStrategy("brew", "brew", ("install", "semgrep")),
        InstallStrategy("pipx", "pipx", ("install", "semgrep")),
        InstallStrategy("pip", "pip3", ("install", "--user", "semgrep")),
    ),
)

CATALOG: Tuple[ScanTool, ...] = (GITLEAKS, TRUFFLEHOG, GIT_SECRETS, TRIVY, SEMGREP)


def all_tools() -> List[ScanTool]:
    """Return every catalog tool in catalog order."""
    return list(CATALOG)


def get_tool(name: str) -> Optional[ScanTool]:
    """Look up a catalog tool by name (case-insensitive)."""
    lowered = name.lower()
    for tool in CATALOG:
        if tool.name == lowered:
            return tool
    return None


def select_tools(names: Optional[Iterable[str]] = None) -> List[ScanTool]:
    """Return the named tools in catalog order; all tools when ``names`` is empty.

    Raises:
        KeyError: If a name is not in the catalog.
    """
    if not names:
        return all_tools()
    wanted = set()
    for name in names:
        tool = get_tool(name)
        if tool is None:
            raise KeyError(f"Unknown tool: {name}. Available: {[t.name for t in CATALOG]}")
        wanted.add(tool.name)
    return [tool for tool in CATALOG if tool.name in wanted]
