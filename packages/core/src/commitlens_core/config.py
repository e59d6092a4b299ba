import logging
from pathlib import Path
from typing import Optional

import yaml

from commitlens_core.errors import ConfigurationError
from commitlens_core.options import (
    DEFAULT_FIELD_PATTERN,
    DEFAULT_HEADER_CORRESPONDENCE,
    DEFAULT_HEADER_PATTERN,
    DEFAULT_ISSUE_PREFIXES,
    DEFAULT_NOTE_KEYWORDS,
    DEFAULT_REFERENCE_ACTIONS,
    DEFAULT_REVERT_CORRESPONDENCE,
    DEFAULT_REVERT_PATTERN,
    SCISSOR,
    GrammarOptions,
)
from commitlens_core.stream import DEFAULT_HIGH_WATER_MARK

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "header_pattern": DEFAULT_HEADER_PATTERN,
    "header_correspondence": list(DEFAULT_HEADER_CORRESPONDENCE),
    "merge_pattern": None,
    "merge_correspondence": [],
    "revert_pattern": DEFAULT_REVERT_PATTERN,
    "revert_correspondence": list(DEFAULT_REVERT_CORRESPONDENCE),
    "field_pattern": DEFAULT_FIELD_PATTERN,
    "note_keywords": list(DEFAULT_NOTE_KEYWORDS),
    "notes_pattern": None,  # template string with "{keywords}", e.g. "^\\s*({keywords}): ?(.*)"
    "reference_actions": list(DEFAULT_REFERENCE_ACTIONS),
    "issue_prefixes": list(DEFAULT_ISSUE_PREFIXES),
    "issue_prefixes_case_sensitive": False,
    "comment_char": None,
    "breaking_header_pattern": None,
    "scissor": SCISSOR,
    "high_water_mark": DEFAULT_HIGH_WATER_MARK,
}

# Keys that configure the stream rather than the grammar.
_STREAM_KEYS = {"high_water_mark"}


def load_config(config_path: str = ".commitlens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .commitlens.yml in the current directory
      3. CLI argument overrides
    """
    config = {k: list(v) if isinstance(v, list) else v for k, v in DEFAULT_CONFIG.items()}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            try:
                file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Could not read {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping, not {type(file_config).__name__}")
        for key, value in file_config.items():
            if key not in DEFAULT_CONFIG:
                logger.warning("Ignoring unknown option %r in %s", key, config_path)
                continue
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def options_from_config(config: dict) -> GrammarOptions:
    """Build GrammarOptions from a dict shaped like DEFAULT_CONFIG.

    Missing keys fall back to the GrammarOptions defaults.
    """
    kwargs = {k: v for k, v in config.items() if k in DEFAULT_CONFIG and k not in _STREAM_KEYS}
    return GrammarOptions(**kwargs)
