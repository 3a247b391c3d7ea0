from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional, Union
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
_LEVEL_NAMES = {'debug': logging.DEBUG, 'info': logging.INFO, 'warning': logging.WARNING, 'warn': logging.WARNING, 'error': logging.ERROR, 'critical': logging.CRITICAL}
Level = Union[str, int, None]

def parse_level(value: Level, default: int=logging.WARNING) -> int:
    if value is None:
        return default
    if isinstance(value, int):
        return value
    raw = str(value).strip().lower()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    return _LEVEL_NAMES.get(raw, default)

def _is_console(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and (not isinstance(handler, logging.FileHandler))

def _find_file_handler(root: logging.Logger, path: Path) -> Optional[logging.FileHandler]:
    target = str(path.absolute())
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler
    return None

def setup_logging(*, console_level: Level=logging.WARNING, file_path: Optional[Union[str, Path]]=None, file_level: Level=logging.DEBUG, replace_existing: bool=True) -> None:
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if replace_existing:
        root.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT)
    consoles = [h for h in root.handlers if _is_console(h)]
    if not consoles:
        consoles = [logging.StreamHandler(sys.stdout)]
        root.addHandler(consoles[0])
    for handler in consoles:
        handler.setLevel(parse_level(console_level))
        handler.setFormatter(formatter)
    if not file_path:
        return
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = _find_file_handler(root, path)
    if handler is None:
        handler = logging.FileHandler(path, mode='w' if replace_existing else 'a', encoding='utf-8')
        root.addHandler(handler)
    handler.setLevel(parse_level(file_level, logging.DEBUG))
    handler.setFormatter(formatter)
