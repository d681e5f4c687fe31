"""
Settings loading for SchemaLens.

Settings live in a YAML file (``configs/settings.yml`` by default, or the path in
``SCHEMALENS_CONFIG``) and are validated into a :class:`Settings` model.
String values may carry ``__ENV:VAR`` tokens that resolve from the environment.
"""
import os
from pathlib import Path
from typing import Optional, Literal, Any

import yaml
from pydantic import BaseModel, Field, ValidationError

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "configs" / "settings.yml"
CONFIG_ENV_VAR = "SCHEMALENS_CONFIG"

_ENV_TOKEN = "__ENV:"


class Settings(BaseModel):
    """Runtime settings for providers, logging and collaborators."""

    provider: Literal["live", "fixture"] = "live"
    fixture_path: Optional[str] = None
    connect_timeout: int = Field(default=10, ge=1, le=300)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None
    document_delay_s: float = Field(default=1.0, ge=0)


def resolve_env_tokens(s: Any) -> Any:
    """Replace every ``__ENV:VAR`` token with ``os.environ["VAR"]`` (empty if unset)."""
    if not isinstance(s, str) or _ENV_TOKEN not in s:
        return s

    head, *tokens = s.split(_ENV_TOKEN)
    out = [head]
    for tok in tokens:
        # Variable name runs until the first non-identifier character
        end = 0
        while end < len(tok) and (tok[end].isalnum() or tok[end] == "_"):
            end += 1
        out.append(os.environ.get(tok[:end], ""))
        out.append(tok[end:])
    return "".join(out)


def _resolve_tree(node: Any) -> Any:
    if isinstance(node, dict):
        return {k: _resolve_tree(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_resolve_tree(v) for v in node]
    return resolve_env_tokens(node)


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load and validate settings from YAML.

    Args:
        path: Explicit settings file. Falls back to ``SCHEMALENS_CONFIG``, then
            the bundled ``configs/settings.yml``. A missing default file yields
            default settings; a missing explicit file is an error.

    Returns:
        Validated Settings instance

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist
        ValueError: If the file content does not validate
    """
    explicit = path or os.environ.get(CONFIG_ENV_VAR)
    config_path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(f"Settings file not found: {config_path}")
        return Settings()

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Invalid configuration in {config_path}: expected a mapping")

    raw = _resolve_tree(raw)

    # Relative fixture paths are relative to the settings file
    fixture = raw.get("fixture_path")
    if fixture and not Path(fixture).is_absolute():
        raw["fixture_path"] = str(config_path.parent / fixture)

    try:
        return Settings(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e
