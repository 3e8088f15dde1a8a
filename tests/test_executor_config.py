from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from tasklane.engine.config import ExecutorConfig
from tasklane.engine.executors import ClaudeExecutor, InstallCache
from tasklane.engine.yaml_config import load_yaml_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in [
        "TASKLANE_CLAUDE_COMMAND",
        "TASKLANE_PLAN_MODE",
        "TASKLANE_EXECUTOR_KIND",
        "TASKLANE_CLAUDE_CONFIG_PATH",
        "TASKLANE_COMMAND_NAME",
        "TASKLANE_FALLBACK_COMMAND",
        "TASKLANE_LOG_LEVEL",
    ]:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = ExecutorConfig.from_env()
    assert config.command is None
    assert config.plan_mode is False
    assert config.resolved_executor_kind == "Claude"
    assert config.claude_config_path == str(Path.home() / ".claude.json")
    assert config.command_name == "claude-code"
    assert config.fallback_command == "npx -y @anthropic-ai/claude-code@latest"
    assert "/opt/homebrew/bin" in config.common_install_dirs
    assert config.log_level == "INFO"


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("TASKLANE_CLAUDE_COMMAND", "claude -p")
    monkeypatch.setenv("TASKLANE_PLAN_MODE", "true")
    monkeypatch.setenv("TASKLANE_CLAUDE_CONFIG_PATH", "/etc/claude.json")
    monkeypatch.setenv("TASKLANE_LOG_LEVEL", "DEBUG")

    config = ExecutorConfig.from_env()

    assert config.command == "claude -p"
    assert config.plan_mode is True
    assert config.resolved_executor_kind == "ClaudePlan"
    assert config.claude_config_path == "/etc/claude.json"
    assert config.log_level == "DEBUG"


def test_explicit_kind_wins(monkeypatch) -> None:
    monkeypatch.setenv("TASKLANE_PLAN_MODE", "1")
    monkeypatch.setenv("TASKLANE_EXECUTOR_KIND", "ClaudeReview")
    assert ExecutorConfig.from_env().resolved_executor_kind == "ClaudeReview"


def test_yaml_section_overrides_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("TASKLANE_CLAUDE_COMMAND", "from-env")
    path = tmp_path / "tasklane.yaml"
    path.write_text(yaml.safe_dump({
        "executor": {
            "command": "from-yaml --flag",
            "plan_mode": True,
            "command_name": "claude",
            "common_install_dirs": ["/srv/bin"],
            "log_level": "WARNING",
        },
    }), encoding="utf-8")

    config = load_yaml_config(path)

    assert config.command == "from-yaml --flag"
    assert config.plan_mode is True
    assert config.command_name == "claude"
    assert config.common_install_dirs == ["/srv/bin"]
    assert config.log_level == "WARNING"


def test_yaml_expands_user_config_path(tmp_path: Path) -> None:
    path = tmp_path / "tasklane.yaml"
    path.write_text("executor:\n  claude_config_path: ~/custom.json\n", encoding="utf-8")
    assert load_yaml_config(path).claude_config_path == str(Path.home() / "custom.json")


def test_yaml_without_executor_section(tmp_path: Path) -> None:
    path = tmp_path / "tasklane.yaml"
    path.write_text("other: 1\n", encoding="utf-8")
    config = load_yaml_config(path)
    assert config.command is None
    assert config.resolved_executor_kind == "Claude"


def test_yaml_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_yaml_config(tmp_path / "nope.yaml")


def test_yaml_parse_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("executor: [unclosed\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        load_yaml_config(path)


def test_executor_from_config(tmp_path: Path) -> None:
    config = ExecutorConfig(
        command="custom-claude",
        plan_mode=True,
        claude_config_path=str(tmp_path / "absent.json"),
    )
    executor = ClaudeExecutor.from_config(config, InstallCache())
    assert executor.executor_kind == "ClaudePlan"
    assert executor.plan_mode is True
    assert executor.resolve_command().command == "custom-claude"
