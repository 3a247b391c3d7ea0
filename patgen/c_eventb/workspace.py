from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import Union
from ..errors import ResourceError
logger = logging.getLogger(__name__)
_UNSAFE_RE = re.compile('[^A-Za-z0-9._-]+')
_DASHES_RE = re.compile('-{2,}')

def sanitize_project_name(candidate: object) -> str:
    if candidate is None:
        return ''
    normalized = _UNSAFE_RE.sub('-', str(candidate).strip())
    normalized = _DASHES_RE.sub('-', normalized)
    return normalized.strip('-')

class ProjectWorkspace:

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def project_dir(self, name: str) -> Path:
        clean = (name or '').strip()
        if not clean or clean in {'.', '..'}:
            raise ResourceError(f'Invalid project name: {name!r}', path=self.root)
        root = self.root.resolve()
        target = (root / clean).resolve()
        if target == root or root not in target.parents:
            raise ResourceError(f'Project {name!r} escapes the workspace', path=self.root)
        return target

    def ensure_project(self, name: str) -> Path:
        target = self.project_dir(name)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ResourceError(f'Cannot create project directory: {exc}', path=target) from exc
        logger.debug('Project directory ready: %s', target)
        return target
