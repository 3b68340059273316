from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from ..errors import ConfigError

log = logging.getLogger(__name__)

_ENV_PATTERN = re.compile(r"\$\{(\w+)\}")

ENDPOINT_KEY = "AZURE_OPENAI_ENDPOINT"
API_KEY_KEY = "AZURE_OPENAI_API_KEY"
DEPLOYMENT_KEY = "AZURE_COMPLETION_DEPLOYMENT"
API_VERSION_KEY = "AZURE_OPENAI_API_VERSION"

DEFAULT_API_VERSION = "2024-02-15-preview"


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    endpoint: str
    api_key: str
    deployment: str
    api_version: str = DEFAULT_API_VERSION

    def redacted(self) -> dict[str, str]:
        return {
            "name": self.name,
            "endpoint": self.endpoint or "(unset)",
            "deployment": self.deployment or "(unset)",
            "api_version": self.api_version,
            "api_key": "***" if self.api_key else "(unset)",
        }


class ProviderRegistry:
    def __init__(self) -> None:
        self._items: Dict[str, ProviderConfig] = {}

    def add(self, cfg: ProviderConfig) -> None:
        key = cfg.name.strip().lower()
        if not key:
            raise ConfigError("Provider name cannot be empty.")
        self._items[key] = cfg

    def get(self, name: str) -> ProviderConfig:
        key = (name or "").strip().lower()
        if not key:
            raise ConfigError("Missing --provider.")
        if key not in self._items:
            known = ", ".join(sorted(self._items.keys())) or "(none)"
            raise ConfigError(f"Unknown provider '{name}'. Known providers: {known}")
        return self._items[key]

    def names(self) -> list[str]:
        return sorted(self._items.keys())


def _expand_env_placeholders(s: str, environ: Mapping[str, str]) -> str:
    # Unset variables expand to "", which the client reports as a config error.
    def repl(m: re.Match) -> str:
        var = m.group(1)
        val = environ.get(var, "")
        if not val:
            log.warning("placeholder ${%s} is not set in the environment", var)
        return val

    return _ENV_PATTERN.sub(repl, s)


def load_provider_registry(yaml_path: str | Path, environ: Mapping[str, str] | None = None) -> ProviderRegistry:
    environ = os.environ if environ is None else environ
    p = Path(yaml_path).expanduser().resolve()
    if not p.exists():
        raise ConfigError(f"Config YAML not found: {p}")

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e
    providers = data.get("providers") if isinstance(data, dict) else None
    if not isinstance(providers, dict) or not providers:
        raise ConfigError("YAML must contain a non-empty 'providers:' mapping.")

    reg = ProviderRegistry()

    for name, cfg in providers.items():
        if not isinstance(cfg, dict):
            raise ConfigError(f"providers.{name} must be a mapping/dict.")

        def _field(key: str, default: str = "") -> str:
            raw = cfg.get(key)
            if raw is None:
                return default
            return _expand_env_placeholders(str(raw).strip(), environ)

        reg.add(ProviderConfig(
            name=str(name),
            endpoint=_field(ENDPOINT_KEY),
            api_key=_field(API_KEY_KEY),
            deployment=_field(DEPLOYMENT_KEY),
            api_version=_field(API_VERSION_KEY) or DEFAULT_API_VERSION,
        ))

    return reg


def provider_from_env(environ: Mapping[str, str] | None = None, name: str = "azure") -> ProviderConfig:
    environ = os.environ if environ is None else environ
    return ProviderConfig(
        name=name,
        endpoint=(environ.get(ENDPOINT_KEY) or "").strip(),
        api_key=(environ.get(API_KEY_KEY) or "").strip(),
        deployment=(environ.get(DEPLOYMENT_KEY) or "").strip(),
        api_version=(environ.get(API_VERSION_KEY) or "").strip() or DEFAULT_API_VERSION,
    )


def resolve_provider(
    provider: Optional[str],
    yaml_path: Optional[Path] = None,
    environ: Mapping[str, str] | None = None,
) -> ProviderConfig:
    """
    Pick the provider configuration once, at startup.

    Priority:
      - YAML (by provider name, or the only entry) when the file exists
      - process environment otherwise
    """
    if yaml_path is not None and Path(yaml_path).expanduser().exists():
        reg = load_provider_registry(yaml_path, environ=environ)
        if provider:
            return reg.get(provider)
        names = reg.names()
        if len(names) == 1:
            return reg.get(names[0])
        raise ConfigError(f"Several providers in {yaml_path}; pick one with --provider ({', '.join(names)}).")
    return provider_from_env(environ, name=provider or "azure")
