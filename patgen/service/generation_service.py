from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union
from ..a_parse.dom_parser import PatternDomParser
from ..a_parse.pattern_model import Pattern
from ..b_compose.composer import PatternComposer
from ..c_eventb.grammar_writer import GrammarWriter
from ..c_eventb.mapper import EventBIR, EventBMapper
from ..c_eventb.workspace import ProjectWorkspace
from ..c_eventb.writer import EventBWriter, WrittenArtifacts
from ..config_manager import GeneratorSettings
from ..errors import EmptyInput
logger = logging.getLogger(__name__)
PathLike = Union[str, Path]

@dataclass
class GenerationResult:
    project_name: str
    project_dir: Path
    irs: List[EventBIR]
    artifacts: List[WrittenArtifacts] = field(default_factory=list)
    grammar_path: Optional[Path] = None

    @property
    def files(self) -> List[Path]:
        out: List[Path] = []
        for item in self.artifacts:
            out.extend((item.context_path, item.machine_path))
        return out

class GenerationService:

    def __init__(self, workspace_dir: PathLike, *, parser: Optional[PatternDomParser]=None, composer: Optional[PatternComposer]=None, mapper: Optional[EventBMapper]=None, writer: Optional[EventBWriter]=None, grammar_writer: Optional[GrammarWriter]=None, write_grammar: bool=True, first_refinement_index: int=0) -> None:
        self.workspace = ProjectWorkspace(workspace_dir)
        self.parser = parser or PatternDomParser()
        self.composer = composer or PatternComposer()
        self.mapper = mapper or EventBMapper()
        self.writer = writer or EventBWriter()
        self.grammar_writer = grammar_writer or GrammarWriter()
        self.write_grammar = write_grammar
        self.first_refinement_index = first_refinement_index

    @classmethod
    def from_settings(cls, settings: GeneratorSettings) -> 'GenerationService':
        return cls(settings.workspace_dir, write_grammar=settings.write_grammar, first_refinement_index=settings.first_refinement_index)

    @property
    def workspace_root(self) -> Path:
        return self.workspace.root

    def parse(self, xml_path: PathLike) -> Pattern:
        return self.parser.parse(xml_path)

    def build_model(self, xml_paths: Sequence[PathLike]) -> Pattern:
        if not xml_paths:
            raise EmptyInput('At least one pattern document is required')
        models = [self.parse(path) for path in xml_paths]
        if len(models) == 1:
            return models[0]
        return self.composer.compose(models)

    def compose(self, xml_paths: Sequence[PathLike], refinement_index: int) -> EventBIR:
        return self.mapper.to_eventb(self.build_model(xml_paths), refinement_index)

    def build(self, layers: Sequence[Sequence[PathLike]], start_index: Optional[int]=None) -> List[EventBIR]:
        if not layers:
            raise EmptyInput('At least one refinement layer is required')
        first = self.first_refinement_index if start_index is None else start_index
        irs: List[EventBIR] = []
        for offset, layer in enumerate(layers):
            if not layer:
                raise EmptyInput(f'Refinement layer {first + offset} has no pattern documents')
            irs.append(self.compose(layer, first + offset))
        return irs

    def write(self, project_name: str, irs: Sequence[EventBIR]) -> GenerationResult:
        project_dir = self.workspace.ensure_project(project_name)
        result = GenerationResult(project_name=project_name, project_dir=project_dir, irs=list(irs))
        if self.write_grammar:
            result.grammar_path = self.grammar_writer.write(project_dir)
        for ir in irs:
            result.artifacts.append(self.writer.write(project_dir, ir))
        return result

    def generate(self, layers: Sequence[Sequence[PathLike]], project_name: str, start_index: Optional[int]=None) -> GenerationResult:
        irs = self.build(layers, start_index)
        result = self.write(project_name, irs)
        logger.info('Generated %d refinement(s) for %s in %s', len(irs), project_name, result.project_dir)
        return result
