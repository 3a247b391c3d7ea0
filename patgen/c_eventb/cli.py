from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from ..a_parse.model_io import load_model
from ..errors import PatgenError
from ..logging_utils import setup_logging
from .mapper import EventBMapper
from .writer import EventBWriter

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Map a pattern model to an Event-B context and machine')
    parser.add_argument('model', type=Path, help='Pattern XML document or model YAML/JSON file')
    parser.add_argument('--refinement', type=int, default=0, help='Refinement index used in the generated names')
    parser.add_argument('--output-dir', type=Path, default=None, help='Project directory to write machine<N>/ into; stdout if unset')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log at DEBUG level')
    return parser.parse_args()

def main() -> None:
    args = parse_args()
    setup_logging(console_level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        ir = EventBMapper().to_eventb(load_model(args.model), args.refinement)
        if args.output_dir:
            written = EventBWriter().write(args.output_dir, ir)
            sys.stdout.write(f'{written.context_path}\n{written.machine_path}\n')
        else:
            sys.stdout.write(ir.context_text + '\n' + ir.machine_text)
    except (PatgenError, ValueError) as exc:
        raise SystemExit(f'{type(exc).__name__}: {exc}')
if __name__ == '__main__':
    main()
