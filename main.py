#!/usr/bin/env python3
"""
Expense Scanner - Main Entry Point.

This is the main entry point for the expense scanner. It provides both
a command-line interface and programmatic access to the pipeline.

Usage:
    Command Line:
        python main.py --input receipt.jpg --output records.json
        python main.py --input ./receipts/ --output ./outputs/records.json
        python main.py --camera

    Python:
        from main import run_extraction
        results = run_extraction("receipt.jpg")

Version: 1.0.0
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager
from expense_scanner.utils.exceptions import ExpenseScannerError
from expense_scanner.utils.helpers import ensure_directory
from expense_scanner.utils.logger import get_logger, setup_logger_from_config

SUPPORTED_EXTENSIONS = {'.pdf', '.jpg', '.jpeg', '.png', '.webp'}
DEFAULT_OUTPUT_NAME = "expense_records.json"


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Expense Scanner - receipts and invoices to expense records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Process single receipt:
        python main.py --input receipt.jpg --output records.json

    Process directory:
        python main.py --input ./receipts/ --output ./outputs/records.json

    Take a photo with the default camera:
        python main.py --camera
        """
    )

    # Input/Output arguments
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input", "-i",
        type=str,
        help="Input file or directory containing receipts and invoices"
    )

    source.add_argument(
        "--camera",
        action="store_true",
        help="Capture one receipt photo from the camera"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help=f"Output JSON file (default: <paths.output_dir>/{DEFAULT_OUTPUT_NAME})"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    if args.output is None:
        args.output = str(Path(config.get("paths.output_dir", "outputs")) / DEFAULT_OUTPUT_NAME)

    logger = setup_logger_from_config()

    if args.debug or args.quiet:
        level = logging.DEBUG if args.debug else logging.WARNING
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    logger.info("=" * 60)
    logger.info("EXPENSE SCANNER")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {'camera' if args.camera else args.input}")
    logger.info(f"Output: {args.output}")

    return config


def collect_input_files(input_path: str) -> List[Path]:
    """
    Resolve the input argument to a sorted list of files.

    Raises:
        FileNotFoundError: If the input path doesn't exist.
    """
    logger = get_logger(__name__)
    path = Path(input_path)

    if not path.exists():
        raise FileNotFoundError(f"Input path not found: {path}")

    # Single files are passed through; the input handler validates the type
    if path.is_file():
        return [path]

    files = sorted(
        candidate for candidate in path.iterdir()
        if candidate.is_file() and candidate.suffix.lower() in SUPPORTED_EXTENSIONS
    )

    if not files:
        logger.warning(f"No supported files found in: {path}")
    else:
        logger.info(f"Found {len(files)} files to process")

    return files


def run_extraction(
    input_path: Optional[str] = None,
    camera: bool = False,
    config_path: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Run the expense scanning pipeline.

    Each document yields one ProcessingResult dictionary. Extraction
    failures are reported in the result, never raised.

    Args:
        input_path: Path to input file or directory.
        camera: Capture one photo from the camera instead.
        config_path: Optional custom configuration file path.

    Returns:
        List of ProcessingResult dictionaries.

    Example:
        >>> results = run_extraction("receipts/")
        >>> for r in results:
        ...     print(r['filename'], len(r['records']))
    """
    logger = get_logger(__name__)

    ConfigurationManager(config_path)

    # Import pipeline components
    from expense_scanner.input_handler import CameraCapture, InputHandler
    from expense_scanner.assembler import ExpenseAssembler, ProcessingResult

    logger.info("Initializing pipeline components...")
    input_handler = InputHandler()
    assembler = ExpenseAssembler()

    results = []

    def process(document) -> None:
        result = assembler.run(document)
        results.append(result.to_dict())

        for record in result.records:
            logger.info(
                f"  {record.date} | {record.description} | {record.amount} | "
                f"{record.category.value} | {record.source.value}"
                f"{' (needs review)' if record.needs_review else ''}"
            )

    if camera:
        try:
            document = CameraCapture().capture()
        except ExpenseScannerError as e:
            if e.kind is None:
                logger.warning(str(e))
                return results
            logger.error(f"Camera capture failed: {e}")
            return [ProcessingResult.failed(e, "camera").to_dict()]
        process(document)
        return results

    files = collect_input_files(input_path)
    logger.info(f"Processing {len(files)} documents...")

    # One document in memory at a time
    for file_path in files:
        try:
            document = input_handler.load(file_path)
        except ExpenseScannerError as e:
            logger.error(f"Error loading {file_path.name}: {e}")
            if e.kind is not None:
                results.append(ProcessingResult.failed(e, file_path.name).to_dict())
            continue

        process(document)

    return results


def write_results(results: List[Dict[str, Any]], output_path: str) -> Path:
    """Write results as JSON, creating the parent directory."""
    path = Path(output_path)
    ensure_directory(path.parent)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(results, f, indent=2, ensure_ascii=False, default=str)

    return path


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 when at least one document succeeded).
    """
    try:
        args = parse_arguments(argv)

        initialize_system(args)
        logger = get_logger(__name__)

        results = run_extraction(
            input_path=args.input,
            camera=args.camera,
            config_path=args.config
        )

        if not results:
            logger.error("No documents processed")
            return 1

        output_file = write_results(results, args.output)
        succeeded = sum(1 for r in results if r['success'])

        logger.info("=" * 60)
        logger.info(f"Processing complete. {succeeded}/{len(results)} documents succeeded.")
        logger.info(f"Records written to: {output_file}")
        logger.info("=" * 60)

        return 0 if succeeded else 1

    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except ExpenseScannerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
