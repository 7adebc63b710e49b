"""Well-known path helpers for clusterprep."""

import os
from pathlib import Path
from typing import Mapping

REQUIREMENTS_FILENAME = "python-requirements.txt"
COLLECTIONS_FILENAME = "ansible-requirements.yml"
VENV_DIRNAME = ".venv"
SYSTEM_BIN_DIR = Path("/usr/local/bin")


def get_root_dir(
    root: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> Path:
    """Return the anchor directory the manifests and runtime live under.

    Priority:
    1. Explicit ``root`` argument (the ``--root`` option)
    2. CLUSTERPREP_ROOT environment variable (if set)
    3. The current working directory
    """
    if root is not None:
        return Path(root).resolve()

    environ = os.environ if environ is None else environ
    if environ.get("CLUSTERPREP_ROOT"):
        return Path(environ["CLUSTERPREP_ROOT"]).resolve()

    return Path.cwd()


def get_requirements_path(root: Path) -> Path:
    return root / REQUIREMENTS_FILENAME


def get_collections_path(root: Path) -> Path:
    return root / COLLECTIONS_FILENAME


def get_venv_dir(root: Path) -> Path:
    return root / VENV_DIRNAME


def get_venv_bin_dir(venv_dir: Path) -> Path:
    return venv_dir / "bin"
