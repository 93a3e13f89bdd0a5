"""Load harness configuration from YAML files and command line overrides."""

import asyncio
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from branch_protection_probe.errors import ConfigurationError
from branch_protection_probe.models.config import (
    HarnessConfig,
    ProbeKind,
    default_probe_rules,
)

DEFAULT_TARGETS = ("main", "staging", "develop")


async def load_config(path: Path) -> HarnessConfig:
    """Load and validate a harness configuration file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file is empty, not valid YAML or does not
            match the configuration schema

    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    content = await asyncio.to_thread(path.read_text)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        raise ConfigurationError(f"Empty config file: {path}")

    if not isinstance(data, Mapping):
        raise ConfigurationError(
            f"Invalid configuration schema in {path}: expected a mapping"
        )

    return parse_config(data)


def parse_config(data: Mapping[str, Any]) -> HarnessConfig:
    """Validate raw configuration data."""
    try:
        return HarnessConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration schema: {exc}") from exc


def default_config() -> HarnessConfig:
    """Configuration probing the core branches with built-in signatures."""
    return parse_config({"targets": [{"name": name} for name in DEFAULT_TARGETS]})


def apply_overrides(
    config: HarnessConfig,
    *,
    targets: Sequence[str] = (),
    remote: str | None = None,
    timeout: float | None = None,
    probes: Sequence[ProbeKind] = (),
) -> HarnessConfig:
    """Return a revalidated copy of config with command line overrides applied.

    Selected probe kinds keep their configured rules and fall back to the
    built-in signatures.
    """
    data = config.model_dump()
    if targets:
        data["targets"] = [{"name": name} for name in targets]
    if probes:
        defaults = default_probe_rules()
        data["probes"] = {
            kind: (config.probes.get(kind) or defaults[kind]).model_dump()
            for kind in probes
        }
    if remote is not None:
        data["remote"] = remote
    if timeout is not None:
        data["timeout"] = timeout
    return parse_config(data)
