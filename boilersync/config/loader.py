"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import BoilersyncConfig, SourceSpec


class ConfigError(ValueError):
    """Configuration is missing, malformed or fails validation."""


def load_config(cli_path: str | None = None) -> BoilersyncConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    if cli_path and not Path(cli_path).exists():
        raise ConfigError(f"Config file not found: {cli_path}")

    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./boilersync.yaml"),
        Path.home() / ".boilersync" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ConfigError(
                        f"Invalid config in {path}: expected a mapping, got {type(raw).__name__}"
                    )
                raw = _expand_env_vars(raw)
                return BoilersyncConfig(**raw)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ConfigError(f"Invalid config in {path}: {e}") from e

    return BoilersyncConfig()


def parse_sources(text: str) -> list[SourceSpec]:
    """Parse a YAML list of source entries, as passed inline on the CLI."""
    if not text.strip():
        raise ConfigError("'sources' input is required and cannot be empty")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse 'sources' YAML: {e}") from e

    if not isinstance(parsed, list):
        raise ConfigError(f"'sources' must be a YAML list, got {type(parsed).__name__}")
    if not parsed:
        raise ConfigError("'sources' list cannot be empty")

    sources: list[SourceSpec] = []
    for index, entry in enumerate(_expand_env_vars(parsed), start=1):
        if not isinstance(entry, dict):
            raise ConfigError(f"Source {index}: expected a mapping, got {type(entry).__name__}")
        try:
            sources.append(SourceSpec(**entry))
        except ValidationError as e:
            raise ConfigError(f"Source {index}: {e}") from e
    return sources


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `boilersync config init`
DEFAULT_CONFIG_TEMPLATE = """\
# boilersync.yaml

# Sources to pull files from
sources:
  - repository: "my-org/boilerplate"
    # ref: "v2.0.0"              # branch, tag or commit; default branch if omitted
    # token: "${BOILERPLATE_TOKEN}"
    files:                       # same path locally and remotely; globs allowed
      - ".editorconfig"
      - ".github/ISSUE_TEMPLATE/*.md"
    mappings:                    # explicit paths; never globs
      - local_path: ".github/workflows/ci.yml"
        source_path: "workflows/ci.yml"

# Credentials
token_env: "GITHUB_TOKEN"
source_token_env: "SOURCE_TOKEN"   # falls back to token_env when unset
# github_api_url: "https://github.example.com/api/v3"

# Behaviour
workspace: "."
create_missing: true
fail_on_error: false

# Reports
output:
  summary_path: null             # e.g. "sync-summary.md"
  json_path: null                # e.g. "sync-summary.json"

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
