from __future__ import annotations
import os
from pathlib import Path
PATGEN_ROOT = Path(__file__).resolve().parent
DATA_DIR = PATGEN_ROOT / 'data'
CONFIG_DIR = PATGEN_ROOT / 'config'
GRAMMAR_DIR = DATA_DIR / 'grammar'
GRAMMAR_FILE = GRAMMAR_DIR / 'PatternBundleGrammar.bnf'

def _env_path(name: str, default: Path) -> Path:
    raw = (os.getenv(name) or '').strip()
    return Path(raw).expanduser() if raw else default
PATTERNS_DIR = _env_path('PATGEN_PATTERNS_DIR', DATA_DIR / 'node_Structure')
GENERATED_DIR = _env_path('PATGEN_WORKSPACE', Path.cwd() / 'generated')
DEFAULT_SETTINGS_FILE = CONFIG_DIR / 'settings.yaml'
__all__ = ['PATGEN_ROOT', 'DATA_DIR', 'CONFIG_DIR', 'GRAMMAR_DIR', 'GRAMMAR_FILE', 'PATTERNS_DIR', 'GENERATED_DIR', 'DEFAULT_SETTINGS_FILE']
