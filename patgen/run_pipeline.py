from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from patgen.config_manager import GeneratorSettings, load_settings
from patgen.errors import PatgenError
from patgen.logging_utils import parse_level, setup_logging
from patgen.service.generation_service import GenerationResult, GenerationService

logger = logging.getLogger(__name__)


def split_inputs(raw: str) -> List[str]:
    parts = [part.strip() for part in str(raw).split(",")]
    return [part for part in parts if part]


def parse_layers(inputs: Optional[Sequence[str]], extra_layers: Optional[Sequence[str]] = None) -> List[List[str]]:
    """All -i values form one composition; each --layer adds a further refinement layer."""
    layers: List[List[str]] = []
    first = [path for raw in inputs or [] for path in split_inputs(raw)]
    if first:
        layers.append(first)
    for raw in extra_layers or []:
        layer = split_inputs(raw)
        if layer:
            layers.append(layer)
    return layers


def apply_cli_overrides(settings: GeneratorSettings, args: argparse.Namespace) -> GeneratorSettings:
    updates = {}
    if args.workspace is not None:
        updates["workspace_dir"] = Path(args.workspace)
    if args.patterns_dir is not None:
        updates["patterns_dir"] = Path(args.patterns_dir)
    if args.host is not None:
        updates["host"] = args.host
    if args.port is not None:
        updates["port"] = int(args.port)
    if args.start_index is not None:
        updates["service_first_refinement_index" if args.server else "first_refinement_index"] = int(args.start_index)
    if args.no_grammar:
        updates["write_grammar"] = False
    if args.log_file is not None:
        updates["log_file"] = Path(args.log_file)
    return replace(settings, **updates)


def run_local(*, layers: Sequence[Sequence[str]], project: str, settings: GeneratorSettings) -> GenerationResult:
    logger.info("[Generate] %d refinement layer(s) -> %s", len(layers), settings.workspace_dir / project)
    service = GenerationService.from_settings(settings)
    result = service.generate([[Path(p) for p in layer] for layer in layers], project)
    for path in result.files:
        logger.info("  - %s", path)
    return result


def run_remote(*, base_url: str, layers: Sequence[Sequence[str]], project: str, settings: GeneratorSettings) -> List[Path]:
    from patgen.service.client import PatternServiceClient

    logger.info("[Remote] %s: %d refinement layer(s)", base_url, len(layers))
    client = PatternServiceClient(base_url)
    archive = client.generate([[Path(p).name for p in layer] for layer in layers], project_name=project)
    extracted = archive.extract_to(settings.workspace_dir)
    for path in extracted:
        logger.info("  - %s", path)
    return extracted


def run_server(settings: GeneratorSettings) -> None:
    import uvicorn

    from patgen.service.server import create_app

    logger.info("[Server] http://%s:%s (patterns: %s)", settings.host, settings.port, settings.patterns_dir)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pattern XML -> composed Event-B context/machine generator")
    parser.add_argument("-i", "--input", dest="inputs", action="append", help="Pattern XML file(s), comma separated or repeated; all are composed into the first refinement")
    parser.add_argument("--layer", dest="layers", action="append", help="Comma separated pattern XML files for one further refinement layer; repeatable")
    parser.add_argument("-p", "--project", default=None, help="Project name (directory under the workspace)")
    parser.add_argument("-o", "--workspace", type=Path, default=None, help="Workspace directory receiving <project>/machine<N>/")
    parser.add_argument("--patterns-dir", type=Path, default=None, help="Directory of pattern XML files served by --server")
    parser.add_argument("--config", type=Path, default=None, help="Settings YAML/JSON file")
    parser.add_argument("--start-index", type=int, default=None, help="Refinement index of the first layer (with --server: of the first layer of each request)")
    parser.add_argument("--no-grammar", action="store_true", help="Do not copy the pattern grammar into the project")
    parser.add_argument("--server", action="store_true", help="Run the HTTP service instead of generating")
    parser.add_argument("--host", default=None, help="Service bind address")
    parser.add_argument("--port", type=int, default=None, help="Service port")
    parser.add_argument("--remote", default=None, help="Base URL of a running service to generate with")
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    try:
        settings = apply_cli_overrides(load_settings(args.config), args)
    except (PatgenError, ValueError) as exc:
        raise SystemExit(f"Configuration error: {exc}")
    console_level = logging.DEBUG if args.verbose else parse_level(settings.log_level, logging.INFO)
    setup_logging(console_level=console_level, file_path=settings.log_file)

    if args.server:
        run_server(settings)
        return

    layers = parse_layers(args.inputs, args.layers)
    if not layers or not args.project:
        raise SystemExit("Usage: patgen -i <pattern.xml>[,pattern2.xml...] [-i ...] [--layer a.xml,b.xml ...] -p <ProjectName> [-o <Workspace>] | --server [--port N]")

    try:
        if args.remote:
            run_remote(base_url=args.remote, layers=layers, project=args.project, settings=settings)
        else:
            run_local(layers=layers, project=args.project, settings=settings)
    except PatgenError as exc:
        logger.debug("Generation failed", exc_info=True)
        raise SystemExit(f"{type(exc).__name__}: {exc}")
    logger.info("Generated in: %s", settings.workspace_dir / args.project)


if __name__ == "__main__":
    main()
