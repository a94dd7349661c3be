"""
Configuration for schema inference.

Defines InferSettings, a frozen dataclass carrying the tag key consulted on
record fields and the well-known types that collapse to leaf columns. Defaults
come from bqschema.constants and bqschema.registry.DEFAULT_WELL_KNOWN_TYPES.

Source of truth
- bqschema.constants.DEFAULT_TAG_KEY
- bqschema.registry.DEFAULT_WELL_KNOWN_TYPES

Notes
- Inference itself never reads configuration; callers opt in with
  InferSettings.load() and pass the result (or its registry) explicitly.
- Precedence: env > TOML > defaults.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .constants import DEFAULT_TAG_KEY
from .registry import DEFAULT_WELL_KNOWN_TYPES, WellKnownTypes

__all__ = ["InferSettings"]

logger = logging.getLogger(__name__)


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


def _parse_type_pairs(text: str) -> dict[str, str]:
    """Parse ``"pkg.mod.Key=string,pkg.mod.When=timestamp"`` into a mapping."""
    pairs: dict[str, str] = {}
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        identifier, sep, field_type = chunk.partition("=")
        if not sep or not identifier.strip() or not field_type.strip():
            raise ValueError(f"well-known type entry must be 'identifier=type' (got {chunk!r})")
        pairs[identifier.strip()] = field_type.strip().lower()
    return pairs


@dataclass(frozen=True)
class InferSettings:
    """
    Runtime settings for schema inference.

    Attributes:
        tag_key (str): Metadata key holding per-field serialization tags.
        include_default_types (bool): Seed the registry with DEFAULT_WELL_KNOWN_TYPES.
        well_known_types (dict[str, str]): Extra identifier -> "string" | "timestamp" entries.

    Examples:
        >>> from bqschema.config import InferSettings
        >>> InferSettings(tag_key="bq").tag_key
        'bq'
    """

    tag_key: str = DEFAULT_TAG_KEY
    include_default_types: bool = True
    well_known_types: dict[str, str] = field(default_factory=dict)

    def build_registry(self) -> WellKnownTypes:
        """
        Build a fresh registry from these settings.

        Raises:
            ValueError: If a configured entry does not map to string or timestamp.
        """
        registry = WellKnownTypes(DEFAULT_WELL_KNOWN_TYPES if self.include_default_types else None)
        for identifier, field_type in self.well_known_types.items():
            registry.register(identifier, field_type)
        return registry

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: InferSettings, cfg: dict[str, Any] | None) -> InferSettings:
        """Apply a loose config mapping onto InferSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if "tag_key" in cfg and isinstance(cfg["tag_key"], str) and cfg["tag_key"].strip():
            s = replace(s, tag_key=cfg["tag_key"].strip())

        if "include_default_types" in cfg:
            s = replace(s, include_default_types=_bool(cfg["include_default_types"]))

        extra = cfg.get("well_known_types")
        if isinstance(extra, str):
            extra = _parse_type_pairs(extra)
        if isinstance(extra, dict):
            merged = dict(s.well_known_types)
            merged.update({str(k): str(v).lower() for k, v in extra.items()})
            s = replace(s, well_known_types=merged)

        return s

    @classmethod
    def from_env(
        cls, base: InferSettings | None = None, prefix: str = "BQSCHEMA_"
    ) -> InferSettings:
        """
        Build InferSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - BQSCHEMA_TAG_KEY
            - BQSCHEMA_INCLUDE_DEFAULT_TYPES (1/0/true/false/yes/no/on/off)
            - BQSCHEMA_WELL_KNOWN_TYPES ("pkg.mod.Key=string,pkg.mod.When=timestamp")

        Raises:
            ValueError: If BQSCHEMA_WELL_KNOWN_TYPES is malformed.
        """
        s = base or cls()

        def get(name: str) -> str | None:
            return os.getenv(prefix + name)

        mapping: dict[str, Any] = {}
        v = get("TAG_KEY")
        if v:
            mapping["tag_key"] = v
        v = get("INCLUDE_DEFAULT_TYPES")
        if v:
            mapping["include_default_types"] = v
        v = get("WELL_KNOWN_TYPES")
        if v:
            mapping["well_known_types"] = _parse_type_pairs(v)

        if mapping:
            logger.debug("applying environment settings: %s", sorted(mapping))
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> InferSettings:
        """
        Build InferSettings from a TOML file.

        Search order when `path` is None:
            1) ./bqschema.toml (with either top-level [infer] or direct keys)
            2) ./pyproject.toml under [tool.bqschema]

        Returns defaults if no file is present.

        Raises:
            tomllib.TOMLDecodeError: If a candidate file exists but is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "bqschema.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            with p.open("rb") as fh:
                data = tomllib.load(fh)
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("bqschema") if isinstance(tool, dict) else None
            elif isinstance(data.get("infer"), dict):
                cfg = data["infer"]
            else:
                cfg = data
            if cfg:
                logger.debug("loaded settings from %s", p)
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> InferSettings:
        """
        Load InferSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (bqschema.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)
