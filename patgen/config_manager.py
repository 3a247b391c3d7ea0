from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from .errors import ResourceError
from .paths import DEFAULT_SETTINGS_FILE, GENERATED_DIR, PATTERNS_DIR
logger = logging.getLogger(__name__)

@dataclass
class GeneratorSettings:
    workspace_dir: Path = field(default_factory=lambda: GENERATED_DIR)
    patterns_dir: Path = field(default_factory=lambda: PATTERNS_DIR)
    host: str = '127.0.0.1'
    port: int = 8080
    first_refinement_index: int = 0
    service_first_refinement_index: int = 1
    write_grammar: bool = True
    log_level: str = 'info'
    log_file: Optional[Path] = None

def _is_placeholder(value: Any) -> bool:
    raw = str(value if value is not None else '').strip().lower()
    return not raw or raw in {'changeme', 'replace-me', 'todo'}

def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {'1', 'true', 'yes', 'y', 'on'}

def _read_payload(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as exc:
        raise ResourceError(f'Cannot read settings file: {exc}', path=path) from exc
    try:
        if path.suffix.lower() == '.json':
            payload = json.loads(text) if text.strip() else {}
        else:
            payload = yaml.safe_load(text) or {}
    except (ValueError, yaml.YAMLError) as exc:
        raise ResourceError(f'Invalid settings file: {exc}', path=path) from exc
    if not isinstance(payload, dict):
        raise ResourceError('Settings file must contain a mapping', path=path)
    return payload.get('patgen', payload) if isinstance(payload.get('patgen'), dict) else payload

def _apply(settings: GeneratorSettings, values: Dict[str, Any]) -> GeneratorSettings:
    updates: Dict[str, Any] = {}
    for key, value in values.items():
        if value is None or _is_placeholder(value):
            continue
        if key in {'workspace_dir', 'patterns_dir', 'log_file'}:
            updates[key] = Path(str(value)).expanduser()
        elif key in {'port', 'first_refinement_index', 'service_first_refinement_index'}:
            try:
                updates[key] = int(str(value).strip())
            except ValueError:
                logger.warning('Ignoring non-integer setting %s=%r', key, value)
        elif key == 'write_grammar':
            updates[key] = _as_bool(value)
        elif key in {'host', 'log_level'}:
            updates[key] = str(value).strip()
        else:
            logger.debug('Ignoring unknown setting %s', key)
    return replace(settings, **updates)
_ENV_KEYS = {'PATGEN_WORKSPACE': 'workspace_dir', 'PATGEN_PATTERNS_DIR': 'patterns_dir', 'PATGEN_HOST': 'host', 'PATGEN_PORT': 'port', 'PATGEN_FIRST_REFINEMENT': 'first_refinement_index', 'PATGEN_SERVICE_FIRST_REFINEMENT': 'service_first_refinement_index', 'PATGEN_WRITE_GRAMMAR': 'write_grammar', 'PATGEN_LOG_LEVEL': 'log_level', 'PATGEN_LOG_FILE': 'log_file'}

def load_settings(config_path: Optional[Path]=None, *, use_env: bool=True) -> GeneratorSettings:
    settings = GeneratorSettings()
    path = Path(config_path) if config_path else DEFAULT_SETTINGS_FILE
    if path.exists():
        settings = _apply(settings, _read_payload(path))
        logger.debug('Loaded settings from %s', path)
    elif config_path:
        raise ResourceError('Settings file not found', path=path)
    if use_env:
        settings = _apply(settings, {attr: os.getenv(env) for env, attr in _ENV_KEYS.items()})
    for key in ('first_refinement_index', 'service_first_refinement_index'):
        if getattr(settings, key) < 0:
            raise ValueError(f'{key} must be >= 0, got {getattr(settings, key)}')
    return settings
__all__ = ['GeneratorSettings', 'load_settings']
