"""Command-line interface for StepView."""
import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional, TextIO

from .config import AppSettings, ConfigError, load_settings, save_settings
from .repository import ScanError
from .services import GalleryService

logger = logging.getLogger(__name__)

PROMPT = "Input path directory : "


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def prompt_for_directory(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> Optional[Path]:
    """
    Ask for the root directory on the terminal.

    Returns:
        The entered path, or None if nothing was entered
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stdout.write(PROMPT + "\n")
    stdout.flush()
    line = stdin.readline().strip()
    return Path(line).expanduser() if line else None


def run_list(input_dir: Path, settings: Optional[AppSettings] = None, stdout: Optional[TextIO] = None) -> int:
    """
    Print the images a session over input_dir would browse, in order.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    stdout = stdout or sys.stdout
    service = GalleryService(settings)
    try:
        service.load(input_dir)
    except ScanError as e:
        logger.error(f"Scan failed: {e}")
        return 1

    for path in service.state.files:
        stdout.write(f"{path}\n")
    return 0


def run_gui(input_dir: Path, settings: Optional[AppSettings] = None) -> int:
    """
    Run StepView in GUI mode.

    Args:
        input_dir: Root directory to browse
        settings: Application settings

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    service = GalleryService(settings)
    try:
        count = service.load(input_dir)
    except ScanError as e:
        logger.error(f"Scan failed: {e}")
        return 1

    if count == 0:
        logger.warning(f"No images found in {input_dir}")

    from .ui.app import StepViewApp

    app = StepViewApp(service)
    return app.run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="StepView - step through a folder of images, deleting and touching them up",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
  Left / Right         previous / next image (wraps around)
  Delete / Backspace   delete the current file from disk
  Up / Down            brightness up / down (saved immediately)
  Page Up / Page Down  contrast up / down (saved immediately)
  s                    crop a fixed margin from every side (saved immediately)
  Escape               quit

Examples:
  # Prompt for the directory, then open the viewer
  python -m step_view.cli

  # Browse a specific directory
  python -m step_view.cli --input /path/to/images

  # Only list the files that would be browsed
  python -m step_view.cli --input /path/to/images --list
        """
    )

    parser.add_argument(
        '--input', '-i',
        type=str,
        default=None,
        help='Root directory to browse (prompted for when omitted)'
    )

    parser.add_argument(
        '--list',
        action='store_true',
        help='Print the images found under the input directory and exit (no GUI)'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Settings file to use instead of the per-user one'
    )

    parser.add_argument(
        '--init-config',
        action='store_true',
        help='Write the current settings to the settings file and exit'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(args.verbose)

    # Load settings
    config_path = Path(args.config).expanduser() if args.config else None
    settings = load_settings(config_path)

    if args.init_config:
        try:
            written = save_settings(settings, config_path)
        except ConfigError as e:
            logger.error(str(e))
            return 1
        print(written)
        return 0

    input_dir = Path(args.input).expanduser() if args.input else prompt_for_directory()
    if input_dir is None:
        logger.error("No input directory given")
        return 1
    input_dir = input_dir.resolve()

    # Run appropriate mode
    if args.list:
        return run_list(input_dir, settings)
    return run_gui(input_dir, settings)


if __name__ == '__main__':
    sys.exit(main())
