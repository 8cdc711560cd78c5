"""
Frigate Notify CLI
Main entry point for running the notification pipeline.

Supports Terraform-like workflow:
  --validate  Check configuration validity
  --plan      Show the effective policy per camera
  --dry-run   Simulate with sample events
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from .config import (
    ConfigValidationError,
    PipelineConfig,
    build_plan,
    load_config_with_env,
    load_sample_events,
    print_plan,
    print_validation_result,
    simulate_dry_run,
    validate_config_full,
)
from .homeassistant import HomeAssistantClient
from .models import NotificationPayload
from .processor import NotificationPipeline, process_events
from .silence import FileSilenceStore, HomeAssistantSilenceStore

logger = logging.getLogger(__name__)


def find_config_file(config_path: str) -> Path:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (if provided and not default)
    2. Current directory (config.yaml)
    3. ~/.config/frigate-notify/config.yaml

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file

    Raises:
        ConfigValidationError: If no config file is found
    """
    if config_path != "config.yaml":
        specified = Path(config_path)
        if specified.exists():
            return specified
        raise ConfigValidationError(f"Specified config file not found: {config_path}")

    search_paths = [
        Path.cwd() / "config.yaml",
        Path.home() / ".config" / "frigate-notify" / "config.yaml",
    ]

    for path in search_paths:
        if path.exists():
            logger.info(f"Using config: {path}")
            return path

    locations = ", ".join(str(p) for p in search_paths)
    raise ConfigValidationError(f"No config file found in any of: {locations}")


def read_config(config_path: str = "config.yaml") -> dict:
    """
    Read a configuration file without validating it.

    Supports pointer files: if config only contains `use: path/to/config.yaml`,
    that file is loaded instead. Environment overrides are applied.

    Raises:
        ConfigValidationError: If the file is missing or not valid YAML
    """
    config_file = find_config_file(config_path)

    try:
        with open(config_file, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        # Support pointer files: { use: "path/to/actual/config.yaml" }
        if isinstance(config, dict) and list(config.keys()) == ["use"]:
            pointer_path = Path(config_file).parent / config["use"]
            logger.info(f"Config pointer: {config_file} -> {config['use']}")
            with open(pointer_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
            config_file = pointer_path

    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigValidationError(f"Config root must be a mapping: {config_file}")

    logger.info(f"Configuration loaded from {config_file}")
    return load_config_with_env(config)


def load_config(config_path: str = "config.yaml") -> PipelineConfig:
    """
    Load and validate a configuration file.

    Returns:
        Validated PipelineConfig

    Raises:
        ConfigValidationError: If the config cannot be loaded or is invalid
    """
    result = validate_config_full(read_config(config_path))
    if not result.valid:
        print_validation_result(result)
        raise ConfigValidationError("; ".join(result.errors))

    for warning in result.warnings:
        logger.warning(warning)

    logger.info("Configuration validated")
    return result.config


def setup_logging(quiet: bool = False, verbose: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
        verbose: If True, show debug output (including every drop)
    """
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("frigate_notify.", "fn.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Frigate Notify - Turn Frigate detection events into push notifications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mosquitto_sub -t frigate/events | python -m frigate_notify --events -
  python -m frigate_notify --events events.jsonl

Terraform-like Commands:
  python -m frigate_notify --validate           # Check config validity
  python -m frigate_notify --plan               # Show per-camera policy
  python -m frigate_notify --dry-run events.json  # Simulate without sending

Environment Variables:
  HA_URL               - Override Home Assistant URL from config
  HA_TOKEN             - Home Assistant long-lived access token
  FRIGATE_NOTIFY_DEBUG - Log every dropped event at INFO
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--events",
        metavar="EVENTS_FILE",
        help="Process events from a JSON / JSON-lines file ('-' for stdin)",
    )

    parser.add_argument(
        "--state-dir",
        default="data/state",
        help="Silence table directory when Home Assistant is not configured",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug output"
    )

    # Terraform-like commands
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and show derived settings",
    )

    parser.add_argument(
        "--plan", action="store_true", help="Show per-camera policy without running"
    )

    parser.add_argument(
        "--dry-run",
        metavar="EVENTS_FILE",
        help="Simulate event processing with a JSON events file",
    )

    return parser.parse_args(argv)


def build_pipeline(config: PipelineConfig, state_dir: str) -> NotificationPipeline:
    """
    Wire the pipeline to Home Assistant, or to local files and stdout.

    Without a homeassistant section, payloads are printed as JSON service
    calls and the silence table is kept under state_dir.
    """
    if config.homeassistant is not None:
        client = HomeAssistantClient(config.homeassistant.url, config.homeassistant.token)

        def deliver(payload: NotificationPayload) -> bool:
            return client.call_service(payload.service, payload.data)

        logger.info(f"Delivering via Home Assistant at {client.url}")
        return NotificationPipeline(
            config, store=HomeAssistantSilenceStore(client), deliver=deliver
        )

    def print_payload(payload: NotificationPayload) -> bool:
        print(json.dumps(payload.to_service_call()), flush=True)
        return True

    logger.warning("No homeassistant configured - printing service calls to stdout")
    return NotificationPipeline(
        config, store=FileSilenceStore(state_dir), deliver=print_payload
    )


def run(args: argparse.Namespace) -> int:
    """Run the selected command. Returns the process exit code."""
    if args.validate:
        result = validate_config_full(read_config(args.config))
        print_validation_result(result)
        return 0 if result.valid else 1

    config = load_config(args.config)

    if args.plan:
        print_plan(build_plan(config))
        return 0

    if args.dry_run:
        simulate_dry_run(config, load_sample_events(args.dry_run))
        return 0

    if not args.events:
        logger.error("Nothing to do: pass --events, --dry-run, --plan or --validate")
        return 2

    pipeline = build_pipeline(config, args.state_dir)

    if args.events == "-":
        process_events((line for line in sys.stdin if line.strip()), pipeline)
    else:
        process_events(load_sample_events(args.events), pipeline)

    return 0


def main(argv: list[str] | None = None) -> None:
    """Console entry point."""
    args = parse_args(argv)
    setup_logging(quiet=args.quiet, verbose=args.verbose)

    try:
        exit_code = run(args)
    except ConfigValidationError as e:
        logger.error(str(e))
        exit_code = 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
