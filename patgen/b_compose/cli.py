from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from ..a_parse.dom_parser import PatternDomParser
from ..a_parse.model_io import dump_model, load_model, write_model
from ..errors import PatgenError
from ..logging_utils import setup_logging
from .composer import PatternComposer
logger = logging.getLogger(__name__)

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Compose several pattern models into one')
    parser.add_argument('models', type=Path, nargs='+', help='Pattern XML documents or model YAML/JSON files, in composition order')
    parser.add_argument('--output', type=Path, default=None, help='Where to store the composed model; stdout if unset')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log at DEBUG level')
    return parser.parse_args()

def main() -> None:
    args = parse_args()
    setup_logging(console_level=logging.DEBUG if args.verbose else logging.WARNING)
    dom_parser = PatternDomParser()
    try:
        models = [load_model(path, dom_parser) for path in args.models]
        composed = PatternComposer().compose(models)
        if args.output:
            write_model(composed, args.output)
            logger.info('Composed model written to %s', args.output)
        else:
            sys.stdout.write(dump_model(composed))
    except PatgenError as exc:
        raise SystemExit(f'{type(exc).__name__}: {exc}')
if __name__ == '__main__':
    main()
