from __future__ import annotations
import shutil
from pathlib import Path
from typing import Optional
from ..errors import ResourceError
from ..paths import GRAMMAR_FILE
OUTPUT_DIR = 'bnf'
OUTPUT_FILE = 'PatternBundleGrammar.bnf'

class GrammarWriter:

    def __init__(self, grammar_file: Optional[Path]=None) -> None:
        self.grammar_file = Path(grammar_file) if grammar_file else GRAMMAR_FILE

    def write(self, project_dir: Path) -> Path:
        if not self.grammar_file.is_file():
            raise ResourceError('Missing grammar resource', path=self.grammar_file)
        target_dir = Path(project_dir) / OUTPUT_DIR
        target = target_dir / OUTPUT_FILE
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.grammar_file, target)
        except OSError as exc:
            raise ResourceError(f'Cannot copy grammar: {exc}', path=target) from exc
        return target
