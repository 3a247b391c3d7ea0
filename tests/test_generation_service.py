"""
Generation service: refinement layers, on-disk layout and failure atomicity.
"""

import pytest

from patgen.c_eventb.grammar_writer import OUTPUT_DIR, OUTPUT_FILE
from patgen.errors import EmptyInput, MalformedDocument, ResourceError
from patgen.service.generation_service import GenerationService


@pytest.fixture
def workspace(tmp_path):
    return tmp_path / "workspace"


@pytest.fixture
def service(workspace) -> GenerationService:
    return GenerationService(workspace)


@pytest.fixture
def layers(samples_dir):
    return [
        [samples_dir / "PSend.xml", samples_dir / "PNDBuffer.xml", samples_dir / "PPacket.xml"],
        [samples_dir / "PSend.xml"],
    ]


class TestGenerate:

    def test_layout_per_refinement(self, service, workspace, layers):
        result = service.generate(layers, "demo")
        project = workspace / "demo"
        assert result.project_dir == project.resolve()
        assert [p.relative_to(result.project_dir).as_posix() for p in result.files] == [
            "machine0/PSend_Composite_C0.ctx",
            "machine0/PSend_Composite_M0.bcm",
            "machine1/PSend_C1.ctx",
            "machine1/PSend_M1.bcm",
        ]
        for path in result.files:
            assert path.is_file()
        assert result.grammar_path == result.project_dir / OUTPUT_DIR / OUTPUT_FILE
        assert result.grammar_path.read_text(encoding="utf-8").startswith("(* Pattern bundle XML grammar *)")

    def test_written_text_matches_ir(self, service, layers):
        result = service.generate(layers, "demo")
        for ir, artifact in zip(result.irs, result.artifacts):
            assert artifact.context_path.read_text(encoding="utf-8") == ir.context_text
            assert artifact.machine_path.read_text(encoding="utf-8") == ir.machine_text

    def test_single_document_layer_is_not_composed(self, service, samples_dir):
        (ir,) = service.build([[samples_dir / "PSend.xml"]])
        assert ir.base_name == "PSend"
        assert "event start_tx" in ir.machine_text

    def test_first_refinement_index(self, workspace, layers):
        service = GenerationService(workspace, first_refinement_index=3)
        result = service.generate(layers, "demo")
        assert [ir.refinement_index for ir in result.irs] == [3, 4]
        assert (result.project_dir / "machine3").is_dir()
        assert service.build(layers, start_index=0)[0].refinement_index == 0

    def test_grammar_copy_can_be_disabled(self, workspace, layers):
        result = GenerationService(workspace, write_grammar=False).generate(layers, "demo")
        assert result.grammar_path is None
        assert not (result.project_dir / OUTPUT_DIR).exists()


class TestFailures:

    def test_no_layers(self, service):
        with pytest.raises(EmptyInput):
            service.build([])

    def test_empty_layer(self, service, samples_dir):
        with pytest.raises(EmptyInput):
            service.build([[samples_dir / "PSend.xml"], []])

    def test_nothing_written_when_a_later_layer_fails(self, service, workspace, samples_dir, write_xml):
        broken = write_xml("broken.xml", "<Machine/>")
        with pytest.raises(MalformedDocument):
            service.generate([[samples_dir / "PSend.xml"], [broken]], "demo")
        assert not (workspace / "demo").exists()

    def test_project_name_cannot_escape_workspace(self, service, samples_dir):
        with pytest.raises(ResourceError):
            service.generate([[samples_dir / "PSend.xml"]], "../outside")
