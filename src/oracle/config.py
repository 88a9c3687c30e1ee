"""Configuration models and loaders for oracle."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

CONFIG_FILE_NAMES: tuple[str, ...] = ("oracle.yaml", "oracle.yml", "pyproject.toml")
SUPPORTED_PROVIDERS: tuple[str, ...] = ("openai", "anthropic")


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for a single completion client.

    Attributes:
        provider: ``openai`` or ``anthropic``.
        api_key: API key; the provider's environment variable is used when unset.
        base_url: Override for the provider API base URL.
        model: Model for plain-text completions.
        vision_model: Model for completions carrying image references (OpenAI).
        max_tokens: Token cap for plain-text completions.
        vision_max_tokens: Token cap for image completions (OpenAI).
        anthropic_version: Value of the ``anthropic-version`` header.
        timeout_s: Optional request timeout; no timeout when unset.
        debug_dump_path: File receiving the assembled message list, if set.
        vision_enabled: Send image references inline and use the vision model;
            when false they are described in text for text-only models.
    """

    provider: str = "openai"
    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None
    vision_model: str | None = None
    max_tokens: int | None = None
    vision_max_tokens: int | None = None
    anthropic_version: str | None = None
    timeout_s: float | None = None
    debug_dump_path: Path | None = None
    vision_enabled: bool = True


@dataclass(frozen=True)
class OracleConfig:
    """Top-level configuration.

    Attributes:
        llm: Completion client settings.
        log_level: Logging level for the CLI when neither --log-level nor
            ORACLE_LOG_LEVEL is given.
    """

    llm: LLMConfig = field(default_factory=lambda: LLMConfig())
    log_level: str = "WARNING"


def load_config(path: Path | None = None) -> OracleConfig:
    """Load configuration from disk.

    Args:
        path: Optional path to a configuration file or directory.

    Returns:
        Parsed OracleConfig with defaults applied when no config exists.
    """

    config_path = _resolve_config_path(path)
    if config_path is None:
        return OracleConfig()

    if config_path.suffix in {".yaml", ".yml"}:
        raw_data = _load_yaml(config_path)
    elif config_path.name == "pyproject.toml" or config_path.suffix == ".toml":
        raw_data = _load_toml(config_path)
    elif config_path.suffix == ".json":
        raw_data = _load_yaml(config_path)
    else:
        raise ValueError(f"Unsupported config file type: {config_path}")

    return _parse_oracle_config(raw_data, base_path=config_path.parent)


def config_to_dict(config: OracleConfig) -> dict[str, Any]:
    """Serialize an OracleConfig into a JSON-compatible dictionary.

    The API key is masked.
    """

    llm = config.llm
    return {
        "log_level": config.log_level,
        "llm": {
            "provider": llm.provider,
            "api_key": "***" if llm.api_key else None,
            "base_url": llm.base_url,
            "model": llm.model,
            "vision_model": llm.vision_model,
            "max_tokens": llm.max_tokens,
            "vision_max_tokens": llm.vision_max_tokens,
            "anthropic_version": llm.anthropic_version,
            "timeout_s": llm.timeout_s,
            "debug_dump_path": str(llm.debug_dump_path) if llm.debug_dump_path else None,
            "vision_enabled": llm.vision_enabled,
        },
    }


def update_llm(config: OracleConfig, **changes: Any) -> OracleConfig:
    """Return a config copy with LLM fields replaced; ``None`` values are ignored."""

    overrides = {key: value for key, value in changes.items() if value is not None}
    if not overrides:
        return config
    return replace(config, llm=replace(config.llm, **overrides))


def _resolve_config_path(path: Path | None) -> Path | None:
    candidate_paths: list[Path] = []
    if path is None:
        candidate_paths.extend(Path(name) for name in CONFIG_FILE_NAMES)
    elif path.is_dir():
        candidate_paths.extend(path / name for name in CONFIG_FILE_NAMES)
    else:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        candidate_paths.append(path)

    for candidate in candidate_paths:
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    if path.name == "pyproject.toml":
        tool_config = data.get("tool", {}).get("oracle", {})
        if not isinstance(tool_config, dict):
            raise ValueError("tool.oracle must be a mapping.")
        return tool_config
    return data


def _load_yaml(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Configuration must be a mapping.")
    return data


def _parse_oracle_config(raw_data: dict[str, Any], base_path: Path) -> OracleConfig:
    return OracleConfig(
        llm=_parse_llm_config(raw_data.get("llm", {}), base_path),
        log_level=str(raw_data.get("log_level", "WARNING")),
    )


def _parse_llm_config(raw: Any, base_path: Path) -> LLMConfig:
    if not isinstance(raw, dict):
        return LLMConfig()
    provider = str(raw.get("provider", "openai")).strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unknown LLM provider: {provider}")
    debug_dump_path = _optional_str(raw.get("debug_dump_path"))
    dump_path: Path | None = None
    if debug_dump_path:
        dump_path = Path(debug_dump_path)
        if not dump_path.is_absolute():
            dump_path = (base_path / dump_path).resolve()
    return LLMConfig(
        provider=provider,
        api_key=_optional_str(raw.get("api_key")),
        base_url=_optional_str(raw.get("base_url")),
        model=_optional_str(raw.get("model")),
        vision_model=_optional_str(raw.get("vision_model")),
        max_tokens=_optional_int(raw.get("max_tokens")),
        vision_max_tokens=_optional_int(raw.get("vision_max_tokens")),
        anthropic_version=_optional_str(raw.get("anthropic_version")),
        timeout_s=_optional_float(raw.get("timeout_s")),
        debug_dump_path=dump_path,
        vision_enabled=bool(raw.get("vision_enabled", True)),
    )


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)
