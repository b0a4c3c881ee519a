from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union


DEFAULT_DIRECTORIES = ("app/", "config/", "database/", "lang/", "routes/")
DEFAULT_SKIP_PATTERNS = ("vendor/", "storage/", "bootstrap/cache/", "node_modules/", ".git/")


@dataclass(frozen=True)
class WalkConfig:
    directories: tuple[str, ...] = DEFAULT_DIRECTORIES
    extensions: tuple[str, ...] = ("php",)
    skip_patterns: tuple[str, ...] = DEFAULT_SKIP_PATTERNS


def _posix(path: Union[str, Path]) -> str:
    return Path(path).as_posix()


def should_skip(path: Union[str, Path], cfg: WalkConfig) -> bool:
    p = _posix(path)
    return any(pattern in p for pattern in cfg.skip_patterns)


def has_extension(path: Union[str, Path], cfg: WalkConfig) -> bool:
    suffix = Path(path).suffix.lstrip(".").lower()
    return suffix in {e.lstrip(".").lower() for e in cfg.extensions}


def iter_files(directory: Union[str, Path], cfg: WalkConfig) -> Iterator[Path]:
    """Yield files under `directory` with a configured extension, in sorted order."""
    root = Path(directory)
    for path in sorted(root.rglob("*")):
        if not path.is_file() or not has_extension(path, cfg):
            continue
        if should_skip(path, cfg):
            continue
        yield path
