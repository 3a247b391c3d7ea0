from __future__ import annotations
import json
from pathlib import Path
from typing import Optional, Union
import yaml
from ..errors import MalformedDocument, ResourceError
from .dom_parser import PatternDomParser
from .pattern_model import Pattern
_YAML_SUFFIXES = {'.yaml', '.yml'}

def dump_model(model: Pattern) -> str:
    return yaml.safe_dump(model.to_dict(), allow_unicode=True, sort_keys=False)

def write_model(model: Pattern, path: Union[str, Path]) -> Path:
    out = Path(path)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        if out.suffix.lower() == '.json':
            out.write_text(json.dumps(model.to_dict(), ensure_ascii=False, indent=2) + '\n', encoding='utf-8')
        else:
            out.write_text(dump_model(model), encoding='utf-8')
    except OSError as exc:
        raise ResourceError(f'Cannot write model: {exc}', path=out) from exc
    return out

def load_model(path: Union[str, Path], parser: Optional[PatternDomParser]=None) -> Pattern:
    src = Path(path)
    suffix = src.suffix.lower()
    if suffix not in _YAML_SUFFIXES and suffix != '.json':
        return (parser or PatternDomParser()).parse(src)
    try:
        text = src.read_text(encoding='utf-8')
    except OSError as exc:
        raise ResourceError(f'Cannot read model: {exc}', path=src) from exc
    try:
        payload = json.loads(text) if suffix == '.json' else yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise MalformedDocument(f'Invalid model file: {exc}', source=src) from exc
    if not isinstance(payload, dict):
        raise MalformedDocument('Model file must contain a mapping', source=src)
    return Pattern.from_dict(payload)
