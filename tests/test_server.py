"""
HTTP service tests using FastAPI's TestClient.
"""

import io
import zipfile

import pytest
from fastapi.testclient import TestClient

from patgen.config_manager import GeneratorSettings
from patgen.service.server import create_app


@pytest.fixture
def settings(tmp_path, patterns_dir) -> GeneratorSettings:
    return GeneratorSettings(workspace_dir=tmp_path / "workspace", patterns_dir=patterns_dir)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


FULL_REQUEST = {
    "projectName": "demo run",
    "refinements": [["PSend.xml", "PNDBuffer.xml", "PPacket.xml"], ["PSend.xml"]],
}


class TestReadEndpoints:

    def test_health(self, client, settings):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "online"
        assert body["patterns_dir"] == str(settings.patterns_dir)

    def test_list_patterns(self, client):
        response = client.get("/api/patterns")
        assert response.status_code == 200
        assert response.json() == ["PNDBuffer.xml", "PPacket.xml", "PSend.xml"]

    def test_list_patterns_without_directory(self, tmp_path):
        settings = GeneratorSettings(workspace_dir=tmp_path / "ws", patterns_dir=tmp_path / "missing")
        with TestClient(create_app(settings)) as test_client:
            assert test_client.get("/api/patterns").json() == []


class TestGenerate:

    def test_success_returns_zip_and_headers(self, client, settings):
        response = client.post("/api/generate", json=FULL_REQUEST)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert response.headers["x-project-name"] == "demo-run"
        assert 'filename="demo-run.zip"' in response.headers["content-disposition"]
        assert response.headers["x-generated-files"].split(";") == [
            "demo-run/machine1/PSend_Composite_C1.ctx",
            "demo-run/machine1/PSend_Composite_M1.bcm",
            "demo-run/machine2/PSend_C2.ctx",
            "demo-run/machine2/PSend_M2.bcm",
        ]
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            names = archive.namelist()
            machine = archive.read("demo-run/machine1/PSend_Composite_M1.bcm").decode("utf-8")
        assert names[:3] == ["demo-run/", "demo-run/machine1/", "demo-run/machine1/PSend_Composite_C1.ctx"]
        assert "demo-run/machine2/" in names
        assert "event start_tx" in machine
        assert (settings.workspace_dir / "demo-run" / "machine2" / "PSend_M2.bcm").is_file()

    def test_first_layer_is_refinement_one(self, client):
        response = client.post("/api/generate", json={"projectName": "p", "refinements": [["PSend.xml"]]})
        assert response.status_code == 200
        assert response.headers["x-generated-files"] == "p/machine1/PSend_C1.ctx;p/machine1/PSend_M1.bcm"

    def test_service_start_index_is_configurable(self, tmp_path, patterns_dir):
        settings = GeneratorSettings(workspace_dir=tmp_path / "ws", patterns_dir=patterns_dir, service_first_refinement_index=0)
        with TestClient(create_app(settings)) as test_client:
            response = test_client.post("/api/generate", json={"projectName": "p", "refinements": [["PSend.xml"]]})
        assert response.headers["x-generated-files"].startswith("p/machine0/PSend_C0.ctx")

    def test_default_project_name(self, client):
        response = client.post("/api/generate", json={"refinements": [["PSend.xml"]]})
        assert response.status_code == 200
        assert response.headers["x-project-name"].startswith("web-session-")

    @pytest.mark.parametrize(
        "payload",
        [
            pytest.param({"refinements": []}, id="no-refinements"),
            pytest.param({"refinements": [["PSend.xml"], ["  "]]}, id="empty-layer"),
        ],
    )
    def test_bad_request(self, client, payload):
        assert client.post("/api/generate", json=payload).status_code == 400

    @pytest.mark.parametrize("name", ["Missing.xml", "../PSend.xml"])
    def test_unknown_pattern(self, client, name):
        response = client.post("/api/generate", json={"refinements": [[name]]})
        assert response.status_code == 404
        assert name in response.json()["detail"]

    def test_invalid_document_is_client_error(self, client, patterns_dir, settings):
        (patterns_dir / "Broken.xml").write_text("<PatternBundle name='B'/>", encoding="utf-8")
        response = client.post("/api/generate", json={"projectName": "bad", "refinements": [["PSend.xml"], ["Broken.xml"]]})
        assert response.status_code == 400
        assert "Failed to generate" in response.json()["detail"]
        assert not (settings.workspace_dir / "bad").exists()

    def test_variable_conflict_is_client_error(self, client, patterns_dir):
        (patterns_dir / "Clash.xml").write_text(
            '<Pattern name="Clash"><Variables><Variable name="sending" type="BOOL"/></Variables></Pattern>',
            encoding="utf-8",
        )
        response = client.post("/api/generate", json={"refinements": [["PSend.xml", "Clash.xml"]]})
        assert response.status_code == 400
        assert "sending" in response.json()["detail"]

    def test_write_failure_is_server_error(self, tmp_path, patterns_dir):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        settings = GeneratorSettings(workspace_dir=blocker, patterns_dir=patterns_dir)
        with TestClient(create_app(settings)) as test_client:
            response = test_client.post("/api/generate", json={"refinements": [["PSend.xml"]]})
        assert response.status_code == 500
