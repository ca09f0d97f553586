"""
Extract character cards from PNG files on the command line.

Usage:
    card-lens-extract card.png [more.png ...] [--record] [--config-dir DIR]

Exit status is 0 when every file carried a card, 1 when any file had no
card and 2 when any file was not a PNG (or could not be read). A broken
configuration file exits with 3.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from card_lens.config import ConfigLoader, ConfigLoadError
from card_lens.services.character_cards import CardImporter, CardMetadataExtractor, ExtractionStatus

EXIT_OK = 0
EXIT_NO_CARD = 1
EXIT_NOT_PNG = 2
EXIT_CONFIG_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract character card metadata embedded in PNG images"
    )
    parser.add_argument("images", nargs="+", type=Path, help="PNG files to inspect")
    parser.add_argument(
        "--record", "-r",
        action="store_true",
        help="Print the imported card record instead of the raw metadata"
    )
    parser.add_argument(
        "--config-dir", "-c",
        type=Path,
        default=Path("."),
        help="Directory containing config/system.yaml"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    try:
        config = ConfigLoader(args.config_dir).load_system_config()
    except ConfigLoadError as e:
        print(str(e), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    extractor = CardMetadataExtractor(config.extractor)
    importer = CardImporter(extractor)
    exit_code = EXIT_OK

    for path in args.images:
        try:
            data = path.read_bytes()
        except OSError as e:
            print(f"{path}: cannot read file: {e}", file=sys.stderr)
            exit_code = max(exit_code, EXIT_NOT_PNG)
            continue

        result = extractor.extract(data)
        if result.status == ExtractionStatus.NOT_CONTAINER_FORMAT:
            print(f"{path}: unsupported file (not a PNG image)", file=sys.stderr)
            exit_code = max(exit_code, EXIT_NOT_PNG)
            continue
        if not result.found:
            print(f"{path}: no card data found", file=sys.stderr)
            exit_code = max(exit_code, EXIT_NO_CARD)
            continue

        if args.record:
            output = importer.build_record(result.metadata, path.name).model_dump(mode="json")
        else:
            output = result.metadata
        if len(args.images) > 1:
            print(f"# {path}")
        print(json.dumps(output, indent=2, ensure_ascii=False))

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
