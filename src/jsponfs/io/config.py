"""
Configuration for the jsponfs.io module.

Defines StoreSettings, a frozen dataclass carrying runtime configuration for the file
store. Settings can be loaded with precedence env > TOML > defaults.

Recognized options
- root_dir: storage directory root (required before use).
- lock: whether writers take the advisory cross-process lock (default on).
- pretty: human-formatted JSON bytes (default off; byte layout only).
- fanout_levels / fanout_width: nested directory sharding of identifiers
  (0 levels = flat layout).
- scan_chunk_size: number of entries decoded per bulk-scan chunk.

Notes
- Loading never fails on malformed values; they fall back to the current value. Call
  StoreSettings.validate() (done by JsponBackend) to reject unusable settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

try:  # Python 3.11+ stdlib TOML parser
    import tomllib  # type: ignore
except Exception:  # pragma: no cover - environments without tomllib
    tomllib = None  # type: ignore[assignment]

from .errors import IoConfigError

DEFAULT_SCAN_CHUNK_SIZE = 256
DEFAULT_FANOUT_WIDTH = 3


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


@dataclass(frozen=True)
class StoreSettings:
    """
    Runtime settings for the jsponfs.io layer.

    Attributes:
        root_dir (str): Directory holding ``all/``, ``root/``, ``tmp/`` and ``lock``.
        lock (bool): Take an exclusive fcntl lock around write finalization.
        pretty (bool): Write indented JSON instead of compact canonical JSON.
        fanout_levels (int): Number of nested directory levels per identifier (0 = flat).
        fanout_width (int): Identifier characters consumed per fan-out level.
        scan_chunk_size (int): Entries decoded per chunk by bulk scans.

    Examples:
        >>> from jsponfs.io import StoreSettings
        >>> StoreSettings(root_dir="db", pretty=True)  # doctest: +ELLIPSIS
        StoreSettings(root_dir='db', lock=True, pretty=True, ...)
    """

    root_dir: str = ""
    lock: bool = True
    pretty: bool = False
    fanout_levels: int = 0
    fanout_width: int = DEFAULT_FANOUT_WIDTH
    scan_chunk_size: int = DEFAULT_SCAN_CHUNK_SIZE

    def validate(self) -> StoreSettings:
        """
        Check that the settings describe a usable store.

        Returns:
            StoreSettings: self, for chaining.

        Raises:
            IoConfigError: Empty root_dir, negative fanout_levels, fanout_width < 1,
                or scan_chunk_size < 1.
        """
        if not self.root_dir:
            raise IoConfigError("root_dir is required")
        if self.fanout_levels < 0:
            raise IoConfigError(f"fanout_levels must be >= 0, got {self.fanout_levels}")
        if self.fanout_width < 1:
            raise IoConfigError(f"fanout_width must be >= 1, got {self.fanout_width}")
        if self.scan_chunk_size < 1:
            raise IoConfigError(f"scan_chunk_size must be >= 1, got {self.scan_chunk_size}")
        return self

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: StoreSettings, cfg: dict[str, Any] | None) -> StoreSettings:
        """Apply a loose config mapping onto StoreSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if "root_dir" in cfg and isinstance(cfg["root_dir"], str):
            s = replace(s, root_dir=cfg["root_dir"])

        for name in ("lock", "pretty"):
            if name in cfg:
                s = replace(s, **{name: _bool(cfg[name])})

        for name in ("fanout_levels", "fanout_width", "scan_chunk_size"):
            if name in cfg:
                try:
                    s = replace(s, **{name: int(cfg[name])})
                except (TypeError, ValueError):
                    pass

        return s

    @classmethod
    def from_env(
        cls, base: StoreSettings | None = None, prefix: str = "JSPONFS_"
    ) -> StoreSettings:
        """
        Build StoreSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - JSPONFS_ROOT_DIR
            - JSPONFS_LOCK (1/0/true/false/yes/no/on/off)
            - JSPONFS_PRETTY
            - JSPONFS_FANOUT_LEVELS
            - JSPONFS_FANOUT_WIDTH
            - JSPONFS_SCAN_CHUNK_SIZE
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for name in (
            "root_dir",
            "lock",
            "pretty",
            "fanout_levels",
            "fanout_width",
            "scan_chunk_size",
        ):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> StoreSettings:
        """
        Build StoreSettings from a TOML file.

        Search order when `path` is None:
            1) ./jsponfs.toml (with either a [store] table or direct keys)
            2) ./pyproject.toml under [tool.jsponfs.store]

        Returns defaults if no file present or tomllib is unavailable.
        """
        s = cls()
        if tomllib is None:
            return s

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)  # type: ignore[arg-type]
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "jsponfs.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("jsponfs", {}).get("store", {}) if isinstance(tool, dict) else None
            else:
                if "store" in data and isinstance(data["store"], dict):
                    cfg = data["store"]
                else:
                    cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> StoreSettings:
        """
        Load StoreSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (jsponfs.toml, pyproject.toml).

        Returns:
            StoreSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
