"""
Path helpers for repository layout.

Layout:
- config/defaults/: tracked default configs
- config/local/: instance-specific writable configs (gitignored)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional


@lru_cache(maxsize=1)
def repo_root() -> Path:
    # src/api/paths.py -> api/ -> src/ -> repo root
    return Path(__file__).resolve().parents[2]


def config_defaults_dir() -> Path:
    return repo_root() / "config" / "defaults"


def config_local_dir() -> Path:
    return repo_root() / "config" / "local"


def first_existing(paths: Iterable[Path]) -> Optional[Path]:
    for path in paths:
        try:
            if path.exists():
                return path
        except OSError:
            continue
    return None


def ensure_local_file(
    *,
    local_path: Path,
    defaults_path: Optional[Path] = None,
    initial_text: str = "",
) -> None:
    """
    Ensure a writable local file exists.

    Bootstraps from ``defaults_path`` when that file exists, otherwise
    writes ``initial_text``.
    """
    if local_path.exists():
        return

    local_path.parent.mkdir(parents=True, exist_ok=True)

    src = first_existing([defaults_path] if defaults_path is not None else [])
    if src is not None:
        local_path.write_text(src.read_text(encoding="utf-8"), encoding="utf-8")
        return
    local_path.write_text(initial_text, encoding="utf-8")
