from __future__ import annotations
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from ..errors import ResourceError
from .mapper import EventBIR
logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class WrittenArtifacts:
    refinement_dir: Path
    context_path: Path
    machine_path: Path

def refinement_dir_name(refinement_index: int) -> str:
    return f'machine{refinement_index}'

def _write_text(path: Path, text: str) -> None:
    # unique temp name per call; concurrent writers of one project must not share it
    with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=path.parent, prefix=path.name + '.', suffix='.tmp', delete=False) as handle:
        handle.write(text)
    try:
        os.replace(handle.name, path)
    except OSError:
        os.unlink(handle.name)
        raise

class EventBWriter:

    def write(self, project_dir: Path, ir: EventBIR) -> WrittenArtifacts:
        refinement_dir = Path(project_dir) / refinement_dir_name(ir.refinement_index)
        ctx_path = refinement_dir / ir.context_filename
        mch_path = refinement_dir / ir.machine_filename
        try:
            refinement_dir.mkdir(parents=True, exist_ok=True)
            _write_text(ctx_path, ir.context_text)
            _write_text(mch_path, ir.machine_text)
        except OSError as exc:
            raise ResourceError(f'Failed to write Event-B artifacts: {exc}', path=refinement_dir) from exc
        logger.info('Wrote %s and %s', ctx_path, mch_path)
        return WrittenArtifacts(refinement_dir=refinement_dir, context_path=ctx_path, machine_path=mch_path)
