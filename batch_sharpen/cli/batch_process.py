import argparse
import logging
import sys
from typing import List, Optional

from ..config.settings import Settings
from ..errors import BatchSharpenError, ConfigError
from ..pipeline.batch_sharpener import sharpen_directory

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batch-sharpen",
        description="Sharpen numerically-named images above a size threshold; "
                    "copy the smaller ones unchanged.",
    )
    # Unset options fall back to SHARPEN_* environment variables
    parser.add_argument("-i", "--input", dest="input_dir", help="input directory (default: imagenes)")
    parser.add_argument("-o", "--output", dest="output_dir", help="output directory (default: imagenes/enhanced)")
    parser.add_argument("-a", "--amount", help="sharpen amount (default: 0.45)")
    parser.add_argument("-m", "--min-bytes", dest="min_bytes",
                        help="files smaller than this are copied as-is (default: 150000)")
    parser.add_argument("--ext", help="input image extension (default: .png)")
    parser.add_argument("--continue-on-error", dest="continue_on_error", action="store_true", default=None,
                        help="log and skip files that fail instead of aborting the run")
    parser.add_argument("--no-progress", dest="show_progress", action="store_false",
                        help="hide the progress bar")
    parser.add_argument("--log-level", dest="log_level", help="logging level (default: INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    overrides = vars(args)
    show_progress = overrides.pop("show_progress")

    try:
        settings = Settings.from_env().with_overrides(**overrides)
    except ConfigError as err:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Invalid configuration: {err}")
        return 2

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        report = sharpen_directory(
            settings.input_dir,
            settings.output_dir,
            amount=settings.amount,
            min_bytes=settings.min_bytes,
            ext=settings.ext,
            continue_on_error=settings.continue_on_error,
            show_progress=show_progress,
        )
    except (BatchSharpenError, OSError) as err:
        logger.error(str(err))
        return 1

    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
