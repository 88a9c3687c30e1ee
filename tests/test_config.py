from pathlib import Path

import pytest

from oracle.config import LLMConfig, OracleConfig, config_to_dict, load_config, update_llm


def test_config_defaults() -> None:
    config = OracleConfig()
    assert config.llm.provider == "openai"
    assert config.llm.api_key is None
    assert config.llm.timeout_s is None
    assert config.log_level == "WARNING"


def test_load_config_from_pyproject(tmp_path: Path) -> None:
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(
        """
[tool.oracle]
log_level = "DEBUG"

[tool.oracle.llm]
provider = "anthropic"
model = "unit-test-model"
max_tokens = 512
anthropic_version = "2023-06-01"
debug_dump_path = "dumps/messages.json"
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.log_level == "DEBUG"
    assert config.llm.provider == "anthropic"
    assert config.llm.model == "unit-test-model"
    assert config.llm.max_tokens == 512
    assert config.llm.debug_dump_path == (tmp_path / "dumps/messages.json").resolve()


def test_load_config_from_json_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "oracle.yaml"
    config_path.write_text(
        '{"llm": {"provider": "openai", "vision_model": "vision", "timeout_s": 12}}',
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.llm.vision_model == "vision"
    assert config.llm.timeout_s == 12.0


def test_load_config_from_non_json_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "oracle.yml"
    config_path.write_text(
        """
llm:
  provider: openai
  model: yaml-model
  vision_max_tokens: 200
  vision_enabled: false
""",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.llm.model == "yaml-model"
    assert config.llm.vision_max_tokens == 200
    assert config.llm.vision_enabled is False
    assert config_to_dict(config)["llm"]["vision_enabled"] is False


def test_load_config_rejects_unknown_provider(tmp_path: Path) -> None:
    config_path = tmp_path / "oracle.yaml"
    config_path.write_text('{"llm": {"provider": "mystery"}}', encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_path)


def test_load_config_without_file_returns_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path) == OracleConfig()


def test_config_to_dict_masks_api_key() -> None:
    config = OracleConfig(llm=LLMConfig(api_key="secret"))

    data = config_to_dict(config)

    assert data["llm"]["api_key"] == "***"


def test_update_llm_ignores_none_overrides() -> None:
    config = OracleConfig(llm=LLMConfig(model="base"))

    updated = update_llm(config, model=None, provider="anthropic")

    assert updated.llm.model == "base"
    assert updated.llm.provider == "anthropic"
    assert config.llm.provider == "openai"
