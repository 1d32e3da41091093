"""HTTP download utilities built on the host's curl or wget.

curl is preferred; wget is the fallback. When neither is installed the
caller gets a CommandError rather than a silent failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from opstools.bootstrap.paths import find_command
from opstools.core.errors import CommandError
from opstools.core.logging import get_logger
from opstools.core.subprocess_runner import run_checked

LOGGER = get_logger(__name__)

NO_DOWNLOAD_TOOL = "no download tool found"


def _validate_url(url: str) -> None:
    if not url.startswith("https://"):
        raise ValueError(f"Only HTTPS URLs are supported: {url}")


@dataclass(frozen=True)
class HttpFetcher:
    """Fetches URLs through whichever HTTP CLI the host provides.

    Attributes:
        headers: Extra request headers (e.g. Accept, Authorization).
        programs: Download programs in order of preference.
    """

    headers: Dict[str, str] = field(default_factory=dict)
    programs: Tuple[str, ...] = ("curl", "wget")

    def _select_program(self) -> Tuple[str, Path]:
        for program in self.programs:
            path = find_command(program)
            if path is not None:
                return program, path
        raise CommandError("/".join(self.programs), NO_DOWNLOAD_TOOL)

    def _header_args(self, program: str) -> List[str]:
        args: List[str] = []
        for name, value in self.headers.items():
            if program == "curl":
                args.extend(["-H", f"{name}: {value}"])
            else:
                args.append(f"--header={name}: {value}")
        return args

    def _command(self, program: str, path: Path, url: str, dest: Optional[Path]) -> List[str]:
        if program == "curl":
            cmd = [str(path), "-fsSL", *self._header_args(program)]
            if dest is not None:
                cmd.extend(["-o", str(dest)])
            return [*cmd, url]
        target = str(dest) if dest is not None else "-"
        return [str(path), "-q", *self._header_args(program), "-O", target, url]

    def _run(self, url: str, dest: Optional[Path]) -> str:
        _validate_url(url)
        program, path = self._select_program()
        cmd = self._command(program, path, url, dest)
        return run_checked(cmd, label=program)

    def fetch_text(self, url: str) -> str:
        """Fetch a URL and return the response body.

        Raises:
            CommandError: If no download program exists or the request fails.
            ValueError: If the URL is not HTTPS.
        """
        LOGGER.debug(f"Fetching {url}")
        return self._run(url, None)

    def download(self, url: str, dest_path: Path) -> Path:
        """Download a URL to ``dest_path``.

        Raises:
            CommandError: If no download program exists or the request fails.
            ValueError: If the URL is not HTTPS.
        """
        LOGGER.debug(f"Downloading {url} -> {dest_path}")
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        self._run(url, dest_path)
        return dest_path
