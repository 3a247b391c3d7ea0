from __future__ import annotations
import io
import re
import zipfile
from typing import Iterable, List, Set, Tuple
from ..c_eventb.mapper import EventBIR
from ..c_eventb.writer import refinement_dir_name
DEFAULT_ARCHIVE_ROOT = 'eventb-artifacts'
_SLASHES_RE = re.compile('[/\\\\]+')

def archive_root(project_name: str) -> str:
    root = _SLASHES_RE.sub('-', (project_name or '').strip()).strip('-')
    return (root or DEFAULT_ARCHIVE_ROOT) + '/'

def archive_entries(irs: Iterable[EventBIR]) -> List[Tuple[str, str]]:
    entries: List[Tuple[str, str]] = []
    for ir in irs:
        folder = refinement_dir_name(ir.refinement_index)
        entries.append((f'{folder}/{ir.context_filename}', ir.context_text))
        entries.append((f'{folder}/{ir.machine_filename}', ir.machine_text))
    return entries

def _ensure_dirs(zf: zipfile.ZipFile, added: Set[str], entry_name: str) -> None:
    parts = entry_name.split('/')[:-1]
    for depth in range(1, len(parts) + 1):
        directory = '/'.join(parts[:depth]) + '/'
        if directory not in added:
            zf.writestr(directory, b'')
            added.add(directory)

def build_archive(project_name: str, irs: Iterable[EventBIR]) -> bytes:
    root = archive_root(project_name)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(root, b'')
        added: Set[str] = {root}
        for relative, text in archive_entries(irs):
            name = root + relative
            _ensure_dirs(zf, added, name)
            zf.writestr(name, text.encode('utf-8'))
    return buffer.getvalue()
