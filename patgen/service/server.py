"""
Pattern generation HTTP service.

Endpoints:
- GET  /health         -> liveness + configured directories
- GET  /api/patterns   -> pattern XML files available for composition
- POST /api/generate   -> compose refinement layers, write them to the workspace
                          and return the generated artifacts as a zip archive

Usage:
    uvicorn patgen.service.server:app
"""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel
from ..c_eventb.workspace import sanitize_project_name
from ..config_manager import GeneratorSettings, load_settings
from ..errors import PatgenError, is_client_error
from .archive import build_archive
from .generation_service import GenerationService
logger = logging.getLogger(__name__)

class GenerateRequest(BaseModel):
    projectName: Optional[str] = None
    refinements: List[List[str]] = []

def default_project_name() -> str:
    return 'web-session-' + datetime.now().strftime('%Y%m%d-%H%M%S')

def relativize(root: Optional[Path], target: Path) -> str:
    absolute = target.resolve()
    if root is not None:
        base = root.resolve()
        if absolute == base or base in absolute.parents:
            return absolute.relative_to(base).as_posix()
    return absolute.as_posix()

def _header_value(value: str) -> str:
    return value.replace('\r', ' ').replace('\n', ' ').strip()

def resolve_pattern(patterns_dir: Path, file_name: str) -> Path:
    base = patterns_dir.resolve()
    candidate = (base / file_name).resolve()
    if base not in candidate.parents or not candidate.is_file():
        raise HTTPException(status_code=404, detail=f'Pattern not found: {file_name}')
    return candidate

def create_app(settings: Optional[GeneratorSettings]=None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or load_settings()
        app.state.settings = cfg
        app.state.service = GenerationService.from_settings(cfg)
        logger.info('Pattern service ready (patterns=%s, workspace=%s)', cfg.patterns_dir, cfg.workspace_dir)
        yield
        logger.info('Pattern service shutting down')
    app = FastAPI(title='Pattern to Event-B generator', version='0.1.0', lifespan=lifespan)

    @app.get('/health')
    def health_check(request: Request):
        cfg: GeneratorSettings = request.app.state.settings
        return {'status': 'online', 'patterns_dir': str(cfg.patterns_dir), 'workspace_dir': str(cfg.workspace_dir)}

    @app.get('/api/patterns')
    def list_patterns(request: Request) -> List[str]:
        patterns_dir: Path = request.app.state.settings.patterns_dir
        if not patterns_dir.is_dir():
            return []
        return sorted((p.name for p in patterns_dir.iterdir() if p.is_file() and p.suffix.lower() == '.xml'))

    @app.post('/api/generate')
    def generate(payload: GenerateRequest, request: Request) -> Response:
        cfg: GeneratorSettings = request.app.state.settings
        service: GenerationService = request.app.state.service
        if not payload.refinements:
            raise HTTPException(status_code=400, detail='No refinements provided')
        layers: List[List[Path]] = []
        for names in payload.refinements:
            cleaned = [name.strip() for name in names if name and name.strip()]
            if not cleaned:
                raise HTTPException(status_code=400, detail='Each refinement must include at least one pattern')
            layers.append([resolve_pattern(cfg.patterns_dir, name) for name in cleaned])
        project_name = sanitize_project_name(payload.projectName) or default_project_name()
        try:
            irs = service.build(layers, start_index=cfg.service_first_refinement_index)
            result = service.write(project_name, irs)
        except PatgenError as exc:
            status = 400 if is_client_error(exc) else 500
            logger.warning('Generation failed for %s (%s): %s', project_name, type(exc).__name__, exc)
            raise HTTPException(status_code=status, detail=f'Failed to generate: {exc}') from exc
        archive = build_archive(project_name, irs)
        files = ';'.join((_header_value(relativize(service.workspace_root, path)) for path in result.files))
        project_path = relativize(Path.cwd(), result.project_dir)
        headers = {'Content-Disposition': f'attachment; filename="{project_name}.zip"', 'X-Project-Name': _header_value(project_name), 'X-Project-Path': _header_value(project_path)}
        if files:
            headers['X-Generated-Files'] = files
        logger.info('Generated %d refinement(s) for %s', len(irs), project_name)
        return Response(content=archive, media_type='application/zip', headers=headers)
    return app
app = create_app()
