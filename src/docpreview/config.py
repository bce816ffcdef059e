"""docpreview configuration.

PreviewConfig is the central configuration object, frozen after creation.
"""

import os
import platform
import tempfile
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PreviewConfig:
    """Configuration for a docpreview run.

    Attributes:
        root: Project directory (contains elm.json).  A file path resolves to
              its parent directory; always absolute after construction.
        address: Bind address for the local preview server.
        port: Bind port for the local preview server and hosted mode.
        browser: Open a browser tab once the local server is listening.
        reload: Watch the project and push live updates.
        debug: Keep temporary build artifacts and print compiler reports.
        compiler: Explicit path to the compiler binary (None = discover).
        elm_home: Compiler home directory (None = ``$ELM_HOME`` or the
            platform default).
        registry_url: Base URL of the public package registry.
        github_api_url: Base URL of the GitHub REST API (hosted mode).
        codeload_url: Base URL for source tarballs (hosted mode).
        static_dir: Directory with the web UI assets (None = no UI).
        work_dir: Scratch directory for hosted-mode checkouts.
        seed_dir: Pre-populated compiler home copied on first hosted build.
        build_timeout: Seconds allowed for a documentation build.
        diff_timeout: Seconds allowed for a compiler diff.
        http_timeout: Seconds allowed for registry and GitHub requests.
        workers: Server workers in hosted mode (0 = auto-detect).

    """

    root: Path = field(default_factory=Path.cwd)
    address: str = "127.0.0.1"
    port: int = 8000
    browser: bool = True
    reload: bool = True
    debug: bool = False
    compiler: str | None = None
    elm_home: Path | None = None
    registry_url: str = "https://package.elm-lang.org"
    github_api_url: str = "https://api.github.com"
    codeload_url: str = "https://codeload.github.com"
    static_dir: Path | None = None
    work_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    seed_dir: Path | None = None
    build_timeout: float = 55.0
    diff_timeout: float = 15.0
    http_timeout: float = 10.0
    workers: int = 0

    def __post_init__(self) -> None:
        root = self.root
        if root.is_file():
            root = root.parent
        if not root.is_absolute():
            root = root.resolve()
        object.__setattr__(self, "root", root)

    @property
    def manifest_path(self) -> Path:
        """Absolute path to the project's elm.json."""
        return self.root / "elm.json"

    @property
    def readme_path(self) -> Path:
        """Absolute path to the project's README.md."""
        return self.root / "README.md"

    @property
    def compiler_home(self) -> Path:
        """Compiler home directory (``ELM_HOME``)."""
        if self.elm_home is not None:
            return self.elm_home
        env = os.environ.get("ELM_HOME")
        if env:
            return Path(env)
        subdir = "AppData/Roaming/elm" if platform.system() == "Windows" else ".elm"
        return Path.home() / subdir

    @property
    def hosted_home(self) -> Path:
        """Compiler home used by hosted-mode builds."""
        return self.work_dir / ".elm-home"
