#!/usr/bin/env python3
"""
Sticker Sheet Cutter CLI

Splits a sheet of sticker-like objects laid out on a grid into one feathered,
transparent image per object.
"""

import argparse
import sys
from pathlib import Path

from stickercut.pipeline import (
    PipelineConfig,
    PipelineLogger,
    StickerCutError,
    StickerPipeline,
)
from stickercut.pipeline.logger import DEFAULT_LOG_FILE


def parse_seed(value: str) -> tuple[int, int]:
    """Parse an "X,Y" seed point"""
    try:
        x, y = (int(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Seed must be X,Y, got {value!r}")
    return x, y


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cut a grid of stickers out of a single image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage (3x3 grid, 10px feather, WebP output next to the input)
  %(prog)s sheet.png

  # 2x2 sheet, hard edges, PNG output into a folder
  %(prog)s --rows 2 --cols 2 --feather 0 --format png -o out/ sheet.png

  # Pick 2x2 or 3x3 from the number of detected objects
  %(prog)s --adaptive-grid sheet.png

  # White background JPEG, looser flood fill from two corners
  %(prog)s --bg-tolerance 30 --bg-seed=0,0 --bg-seed=-1,-1 sheet.jpg
        """,
    )

    # Positional arguments
    parser.add_argument("files", nargs="+", type=Path, help="Input image files")

    # Output options
    parser.add_argument(
        "-o", "--output-dir", type=Path, help="Output directory (default: next to input)"
    )
    parser.add_argument(
        "--format",
        choices=["webp", "png"],
        default="webp",
        help="Output image format (default: webp)",
    )
    parser.add_argument(
        "--lossless", action="store_true", help="Use lossless WebP encoding"
    )

    # Grid options
    parser.add_argument("--rows", type=int, default=3, help="Grid rows (default: 3)")
    parser.add_argument("--cols", type=int, default=3, help="Grid columns (default: 3)")
    parser.add_argument(
        "--adaptive-grid",
        action="store_true",
        help="Use 3x3 when more than 6 objects are found, else 2x2",
    )

    # Compositing options
    parser.add_argument(
        "--feather",
        type=int,
        default=10,
        metavar="PX",
        help="Edge feather radius in pixels (default: 10, 0 = hard edges)",
    )
    parser.add_argument(
        "--feather-edge",
        choices=["transparent", "reflect"],
        default="transparent",
        help="How the blur treats pixels beyond the crop (default: transparent)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        metavar="N",
        help="Composite regions on N threads (default: 1)",
    )

    # Background fallback options
    parser.add_argument(
        "--bg-tolerance",
        type=int,
        default=10,
        help="Per-channel flood fill tolerance for images without alpha (default: 10)",
    )
    parser.add_argument(
        "--bg-seed",
        type=parse_seed,
        action="append",
        metavar="X,Y",
        help="Background seed point, repeatable (default: 0,0)",
    )

    # Logging options
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug mode with detailed logging"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=DEFAULT_LOG_FILE,
        help=f"Log file path (default: {DEFAULT_LOG_FILE})",
    )

    return parser


def main(argv=None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = PipelineConfig(
            rows=args.rows,
            cols=args.cols,
            adaptive_grid=args.adaptive_grid,
            feather_px=args.feather,
            feather_edge=args.feather_edge,
            max_workers=args.workers,
            bg_tolerance=args.bg_tolerance,
            bg_seed_points=tuple(args.bg_seed) if args.bg_seed else ((0, 0),),
            output_format=args.format,
            webp_lossless=args.lossless,
            output_dir=args.output_dir,
        )
    except ValueError as e:
        parser.error(str(e))

    logger = PipelineLogger(
        log_file=args.log_file, debug_mode=args.debug, verbose=args.verbose
    )
    pipeline = StickerPipeline(config=config, logger=logger)

    logger.log_info(f"Processing {len(args.files)} image(s)...")

    success_count = 0

    for file_path in args.files:
        try:
            outputs = pipeline.process(file_path)
            logger.log_info(f"✓ Success: {file_path} → {len(outputs)} stickers")
            success_count += 1

        except FileNotFoundError as e:
            logger.log_error(f"✗ File not found: {e}")
        except StickerCutError as e:
            logger.log_error(f"✗ Failed: {e}")
        except Exception as e:
            logger.log_error(f"✗ Failed: {e}", exc_info=args.verbose or args.debug)

    logger.log_info(f"\nDone! Processed {success_count}/{len(args.files)} images.")

    return 0 if success_count == len(args.files) else 1


if __name__ == "__main__":
    sys.exit(main())
