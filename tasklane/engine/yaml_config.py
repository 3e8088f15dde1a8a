"""YAML configuration loader.

Optional alternative to TASKLANE_* env vars. Env-derived values are
the base layer; keys present in the YAML ``executor`` section win.

Example YAML:
    executor:
      command: /opt/tools/claude-code -p --verbose --output-format=stream-json
      plan_mode: true
      kind: ClaudePlan
      claude_config_path: ~/.claude.json
      command_name: claude-code
      fallback_command: npx -y @anthropic-ai/claude-code@latest
      common_install_dirs: [/usr/local/bin, ~/.local/bin]
      log_level: DEBUG
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import ExecutorConfig

logger = logging.getLogger(__name__)

_STRING_KEYS = {
    "command": "command",
    "kind": "executor_kind",
    "claude_config_path": "claude_config_path",
    "command_name": "command_name",
    "fallback_command": "fallback_command",
    "log_level": "log_level",
}


def load_yaml_config(path: str | Path) -> ExecutorConfig:
    """Load an ExecutorConfig from a YAML file.

    Raises FileNotFoundError / yaml.YAMLError like any config read; a
    file with no ``executor`` section yields the env-derived config.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error("load_yaml_config: config file not found at %s", path)
        raise
    except yaml.YAMLError as exc:
        logger.error("load_yaml_config: YAML parse error in %s: %s", path, exc)
        raise

    config = ExecutorConfig.from_env()
    if not isinstance(raw, dict):
        logger.warning("load_yaml_config: %s is not a mapping; ignoring", path)
        return config

    section = raw.get("executor") or {}
    if not isinstance(section, dict):
        logger.warning(
            "load_yaml_config: 'executor' in %s is not a mapping; ignoring", path,
        )
        return config

    for key, attr in _STRING_KEYS.items():
        value = section.get(key)
        if value is None:
            continue
        setattr(config, attr, str(value))

    if "plan_mode" in section:
        config.plan_mode = bool(section["plan_mode"])

    dirs = section.get("common_install_dirs")
    if isinstance(dirs, list):
        config.common_install_dirs = [str(d) for d in dirs]

    config.claude_config_path = str(Path(config.claude_config_path).expanduser())

    logger.info(
        "Parsed YAML config %s: kind=%s override=%s",
        path.name, config.resolved_executor_kind, config.command or "<none>",
    )
    return config
