from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from ..errors import PatgenError
from ..logging_utils import setup_logging
from .dom_parser import PatternDomParser
from .model_io import dump_model, write_model
logger = logging.getLogger(__name__)

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Validate a pattern XML document and dump its model')
    parser.add_argument('xml', type=Path, help='Pattern bundle or legacy pattern XML')
    parser.add_argument('--output', type=Path, default=None, help='Where to store the model (YAML or .json); stdout if unset')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log at DEBUG level')
    return parser.parse_args()

def main() -> None:
    args = parse_args()
    setup_logging(console_level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        model = PatternDomParser().parse(args.xml)
        if args.output:
            write_model(model, args.output)
            logger.info('Model written to %s', args.output)
        else:
            sys.stdout.write(dump_model(model))
    except PatgenError as exc:
        raise SystemExit(f'{type(exc).__name__}: {exc}')
if __name__ == '__main__':
    main()
