"""GitHub release asset discovery and binary installation.

Release asset names are not standardized, so assets are matched by
substring: the lowercased name must contain an OS token and an
architecture token of the host platform, and end in a known archive
suffix. Windows prefers zip archives, every other platform tar.gz.
"""

from __future__ import annotations

import json
import shutil
import tarfile
import tempfile
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from opstools.bootstrap.download import HttpFetcher
from opstools.bootstrap.paths import scratch_root, select_install_dir
from opstools.bootstrap.platform import Platform
from opstools.config.models import GitHubConfig
from opstools.core.errors import CommandError, ConfigError, IoError, OperationError
from opstools.core.logging import get_logger

LOGGER = get_logger(__name__)


class ArchiveKind(str, Enum):
    """Archive format of a release asset."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"
    UNKNOWN = "unknown"


def classify_archive(name: str) -> ArchiveKind:
    """Classify an asset file name by suffix (case-insensitive)."""
    lowered = name.lower()
    if lowered.endswith(".tar.gz") or lowered.endswith(".tgz"):
        return ArchiveKind.TAR_GZ
    if lowered.endswith(".zip"):
        return ArchiveKind.ZIP
    return ArchiveKind.UNKNOWN


@dataclass(frozen=True)
class ReleaseAsset:
    """A downloadable release archive."""

    name: str
    url: str
    kind: ArchiveKind


def select_asset(assets: Iterable[Mapping[str, Any]], platform: Platform) -> Optional[ReleaseAsset]:
    """Pick the best asset for ``platform`` from a release's asset list.

    Assets lacking a name or download URL, not matching both an OS and an
    architecture token, or with an unknown archive suffix are discarded.
    Among the rest the platform's preferred archive kind wins, otherwise
    the first match.

    Returns:
        The chosen asset, or None when nothing is compatible.
    """
    matches: List[ReleaseAsset] = []
    for asset in assets:
        name = asset.get("name")
        url = asset.get("browser_download_url")
        if not isinstance(name, str) or not isinstance(url, str):
            continue
        if not platform.matches(name):
            continue
        kind = classify_archive(name)
        if kind is ArchiveKind.UNKNOWN:
            continue
        matches.append(ReleaseAsset(name=name, url=url, kind=kind))

    if not matches:
        return None

    preferred = ArchiveKind.ZIP if platform.prefer_zip else ArchiveKind.TAR_GZ
    for asset in matches:
        if asset.kind is preferred:
            return asset
    return matches[0]


class ReleaseInstallStatus(str, Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ReleaseInstallOutcome:
    """Result of a release-based install attempt."""

    status: ReleaseInstallStatus
    path: Optional[Path] = None
    reason: str = ""


class ReleaseAssetResolver:
    """Finds, downloads and installs binaries from GitHub releases."""

    def __init__(
        self,
        github: Optional[GitHubConfig] = None,
        fetcher: Optional[HttpFetcher] = None,
        install_dir: Optional[Path] = None,
        asset_fetcher: Optional[HttpFetcher] = None,
    ):
        """Initialize ReleaseAssetResolver.

        Args:
            github: GitHub API settings (URL, token, user agent).
            fetcher: HTTP fetcher for API requests; defaults to curl/wget
                with the GitHub API headers.
            install_dir: Override for the binary install directory.
            asset_fetcher: HTTP fetcher for asset downloads. It carries no
                API headers, so the token never reaches the download host.
        """
        self._github = github or GitHubConfig()
        self._fetcher = fetcher or HttpFetcher(headers=self._github.api_headers())
        self._asset_fetcher = asset_fetcher or HttpFetcher()
        self._install_dir = install_dir

    def latest_release_url(self, repository: str) -> str:
        return f"{self._github.api_url}/repos/{repository}/releases/latest"

    def fetch_latest_matching_asset(
        self, repository: str, platform: Platform
    ) -> Optional[ReleaseAsset]:
        """Fetch the latest release of ``repository`` and pick a matching asset.

        Returns:
            The best asset, or None if no asset suits the platform.

        Raises:
            CommandError: If the metadata cannot be fetched.
            ConfigError: If the metadata is not JSON or has no asset list.
        """
        api_url = self.latest_release_url(repository)
        body = self._fetcher.fetch_text(api_url)
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise ConfigError(api_url, f"failed to parse release metadata: {e}") from e

        assets = payload.get("assets") if isinstance(payload, dict) else None
        if not isinstance(assets, list):
            raise ConfigError(api_url, "release metadata has no assets")

        asset = select_asset(assets, platform)
        if asset is None:
            LOGGER.debug(f"No {platform.name} asset among {len(assets)} assets of {repository}")
        else:
            LOGGER.debug(f"Selected release asset {asset.name} for {platform.name}")
        return asset

    def install_latest(
        self, repository: str, binary_name: str, platform: Optional[Platform]
    ) -> ReleaseInstallOutcome:
        """Install ``binary_name`` from the latest release of ``repository``.

        Never raises for expected failures; they are reported as the outcome's
        reason.
        """
        if platform is None:
            return ReleaseInstallOutcome(
                ReleaseInstallStatus.SKIPPED, reason="unsupported operating system or architecture"
            )

        try:
            asset = self.fetch_latest_matching_asset(repository, platform)
        except (OperationError, ValueError) as e:
            return ReleaseInstallOutcome(ReleaseInstallStatus.FAILED, reason=f"GitHub release: {e}")

        if asset is None:
            return ReleaseInstallOutcome(
                ReleaseInstallStatus.FAILED,
                reason=f"no matching GitHub release asset for {platform.name}",
            )

        try:
            path = self.download_and_install(asset, binary_name, platform)
        except (OperationError, ValueError) as e:
            return ReleaseInstallOutcome(ReleaseInstallStatus.FAILED, reason=f"GitHub release: {e}")
        return ReleaseInstallOutcome(ReleaseInstallStatus.INSTALLED, path=path)

    def download_and_install(self, asset: ReleaseAsset, binary_name: str, platform: Platform) -> Path:
        """Download ``asset``, extract it and install the named binary.

        The scratch directory holding the archive is removed afterwards.
        """
        base = scratch_root()
        base.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="release-", dir=base))
        try:
            archive = work_dir / f"download.{asset.kind.value}"
            self._asset_fetcher.download(asset.url, archive)
            extract_dir = work_dir / "extract"
            extract_archive(archive, asset.kind, extract_dir)
            binary = find_binary_in_dir(extract_dir, binary_name, platform.executable_suffix)
            if binary is None:
                raise CommandError(binary_name, "executable not found in extracted archive")
            return install_binary(binary, binary_name + platform.executable_suffix, self._install_dir)
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)


def _check_member(dest_dir: Path, member_name: str) -> None:
    member_path = (dest_dir / member_name).resolve()
    if not member_path.is_relative_to(dest_dir.resolve()):
        raise ValueError(f"Path traversal detected: {member_name}")


def extract_archive(archive: Path, kind: ArchiveKind, dest_dir: Path) -> Path:
    """Extract a tar.gz or zip archive into ``dest_dir``.

    Member paths escaping ``dest_dir`` are rejected.

    Raises:
        CommandError: If the archive is corrupt or of an unknown kind.
        ValueError: On path traversal.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    try:
        if kind is ArchiveKind.TAR_GZ:
            with tarfile.open(archive, "r:gz") as tar:
                for tar_member in tar.getmembers():
                    _check_member(dest_dir, tar_member.name)
                    tar.extract(tar_member, path=dest_dir)
        elif kind is ArchiveKind.ZIP:
            with zipfile.ZipFile(archive, "r") as zf:
                for zip_member in zf.namelist():
                    _check_member(dest_dir, zip_member)
                zf.extractall(dest_dir)
        else:
            raise CommandError("extract", f"unsupported archive: {archive.name}")
    except (tarfile.TarError, zipfile.BadZipFile) as e:
        raise CommandError("extract", f"{archive.name}: {e}") from e
    return dest_dir


def find_binary_in_dir(root: Path, binary: str, suffix: str = "") -> Optional[Path]:
    """Recursively search ``root`` for a file named ``binary`` (or ``binary + suffix``)."""
    names = {binary, binary + suffix} if suffix else {binary}
    for path in sorted(root.rglob("*")):
        if path.name in names and path.is_file():
            return path
    return None


def install_binary(source: Path, binary_name: str, install_dir: Optional[Path] = None) -> Path:
    """Copy ``source`` into the install directory and mark it executable.

    Permission bits are set explicitly; archives are not trusted to carry them.

    Raises:
        IoError: If the directory cannot be created or the copy fails.
    """
    target_dir = select_install_dir(install_dir)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(target_dir, e) from e

    target_path = target_dir / binary_name
    try:
        shutil.copyfile(source, target_path)
        target_path.chmod(0o755)
    except OSError as e:
        raise IoError(target_path, e) from e

    LOGGER.info(f"Installed {binary_name} to {target_path}")
    return target_path
