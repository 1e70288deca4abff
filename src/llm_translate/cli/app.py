"""
CLI Application - Command line interface for llm-translate.

Watches two files and keeps them translations of each other.
"""

import argparse
import logging
import sys
from pathlib import Path

from llm_translate import __version__
from llm_translate.adapters import AnthropicTransformationClient, EnvironmentConfigProvider
from llm_translate.application import ChangePropagationLoop, ProcessingGate, TransformationStep
from llm_translate.core.domain import FilePair, ModelName
from llm_translate.core.exceptions import InvalidModelError, SnapshotReadError

from .exit_codes import ExitCode
from .logging import setup_logging
from .output import Console, WatchDisplay


USAGE = "Usage: llm-translate <file1> <file2>"
USAGE_EXAMPLE = "Example: llm-translate polish.md english.md"
MODELS_HELP = "\n".join(f"  {m}" for m in ModelName.choices())


def create_parser() -> argparse.ArgumentParser:
    """
    Create the command-line argument parser for llm-translate.

    The file count and --model value are checked by main() rather than by
    argparse, so that both fail with exit code 1 and a usage hint.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="llm-translate",
        description="Keep two files in sync by translating every change with an LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Keep a Polish and an English document in sync
  llm-translate polish.md english.md

  # Use a different model
  llm-translate --model claude-3-5-haiku-20241022 notes_pl.txt notes_en.txt

Models:
{MODELS_HELP}

The API key is read from ~/.llm-translate-key (override with LLM_TRANSLATE_KEY_FILE).
        """,
    )

    parser.add_argument("files", nargs="*", metavar="FILE", help="The two files to keep in sync")
    parser.add_argument(
        "--model",
        "-m",
        default=None,
        help=f"Model to translate with (default: {ModelName.default().value})",
    )
    parser.add_argument("--config", "-c", help="Path to a config file (.yaml, .yml or .toml)")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Seconds before a translation call is abandoned"
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("--verbose", action="store_true", help="Verbose (debug) logging")
    output_group.add_argument("--quiet", "-q", action="store_true", help="Only show errors")
    output_group.add_argument("--no-color", action="store_true", help="Disable colored output")
    output_group.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log output format (default: text)",
    )
    output_group.add_argument("--log-file", help="Also write logs to this file")

    parser.add_argument(
        "--version", "-v", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def run_watch(args: argparse.Namespace, console: Console) -> int:
    """
    Run watch mode until interrupted.

    Args:
        args: Parsed command-line arguments.
        console: Console for startup diagnostics.

    Returns:
        Exit code.
    """
    logger = logging.getLogger("llm-translate")

    for path in args.files:
        if not Path(path).is_file():
            console.error(f"File not found: {path}")
            return ExitCode.ERROR

    config_file = Path(args.config) if args.config else None
    config_provider = EnvironmentConfigProvider(config_file=config_file, cli_overrides=vars(args))
    errors = config_provider.validate()
    if errors:
        console.config_errors(errors)
        return ExitCode.ERROR

    config = config_provider.load()

    try:
        pair = FilePair.read(*args.files)
    except (FileNotFoundError, SnapshotReadError) as e:
        console.error(str(e))
        return ExitCode.ERROR

    client = AnthropicTransformationClient.from_config(config.translate)
    step = TransformationStep(
        client, model=config.translate.model, max_tokens=config.translate.max_tokens
    )
    display = WatchDisplay(console=console)

    loop = ChangePropagationLoop(
        pair=pair,
        step=step,
        gate=ProcessingGate(settle_delay=config.watch.settle_delay),
        debounce_seconds=config.watch.debounce,
        on_change_detected=display.show_change_detected,
        on_auto_translate=display.show_auto_translate,
        on_translation_complete=display.show_translation_complete,
    )

    display.show_start(pair.first, pair.second, config.translate.model)
    console.debug(
        f"Timeout {config.translate.timeout}s, settle delay {config.watch.settle_delay}s, "
        f"debounce {config.watch.debounce}s"
    )
    logger.debug(f"Watching {pair} with {config.translate.model}")

    try:
        # Blocks until Ctrl+C; watchers are closed on the way out
        loop.start()
    except KeyboardInterrupt:
        logger.debug("Interrupted, watchers closed")
    finally:
        display.show_stop(loop.stats)

    return ExitCode.SUCCESS


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the llm-translate CLI.

    Args:
        argv: Arguments to parse (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, 1 for any startup failure).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    console = Console(color=not args.no_color, verbose=args.verbose, quiet=args.quiet)

    if len(args.files) != 2:
        console.error(USAGE)
        console.hint(USAGE_EXAMPLE)
        return ExitCode.ERROR

    if args.model is not None:
        try:
            args.model = ModelName.from_string(args.model).value
        except InvalidModelError as e:
            console.error(str(e))
            console.hint(f"Valid models: {', '.join(e.valid)}")
            return ExitCode.ERROR

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        log_format=args.log_format,
        log_file=args.log_file,
        use_colors=False if args.no_color else None,
    )

    try:
        return run_watch(args, console)
    except Exception as e:
        console.error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback

            console.print()
            traceback.print_exc()
        return ExitCode.ERROR


def run() -> None:
    """
    Entry point for the console script.

    Calls main() and exits with its return code.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
