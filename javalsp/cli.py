#!/usr/bin/env python3
"""Command-line interface for javalsp."""

import argparse
import logging
import sys
from typing import List, Optional

from javalsp.config import InstallerSettings
from javalsp.errors import JavaLspError
from javalsp.service import JavaLanguageService


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Command-line arguments. If None, sys.argv is used.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Install and launch the Eclipse JDT language server"
    )

    # Add container argument
    parser.add_argument(
        "--container",
        "-c",
        default=None,
        help="Installation directory (default: $JAVALSP_CONTAINER_DIR or ~/.javalsp/jdtls)"
    )

    # Add action subparsers
    subparsers = parser.add_subparsers(dest="action", help="Action to perform")

    # Latest subcommand
    _latest_parser = subparsers.add_parser("latest", help="Print the latest server version")  # type: ignore

    # Install subcommand
    install_parser = subparsers.add_parser("install", help="Install the runtime and the server")
    install_parser.add_argument(
        "--update",
        action="store_true",
        help="Replace the server if a newer release is available"
    )

    # Command subcommand
    _command_parser = subparsers.add_parser(  # type: ignore
        "command", help="Print the launch command, one argument per line"
    )

    # Status subcommand
    _status_parser = subparsers.add_parser("status", help="Show the installation state")  # type: ignore

    # Add debug flag
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    """Run the CLI application.

    Args:
        args: Command-line arguments. If None, sys.argv is used.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parsed_args = parse_args(args)

    # Configure logging
    log_level = logging.DEBUG if parsed_args.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if parsed_args.action is None:
        print("Please specify an action. Use --help for available commands.")
        return 1

    service = JavaLanguageService(InstallerSettings.from_env(container_dir=parsed_args.container))

    try:
        if parsed_args.action == "latest":
            print(service.latest_version())
            return 0

        if parsed_args.action == "install":
            spec = service.install(update=parsed_args.update)
            print(f"Installed {service.installer.installed_version()} into {service.settings.container_dir}")
            print(" ".join(spec.command()))
            return 0

        if parsed_args.action == "command":
            spec = service.launch_spec()
            if spec is None:
                print("The language server is not installed. Run 'javalsp install' first.")
                return 1
            print("\n".join(spec.command()))
            return 0

        if parsed_args.action == "status":
            for key, value in service.status().items():
                print(f"{key}: {value if value is not None else '-'}")
            return 0

        return 1

    except JavaLspError as e:
        logging.error(f"Error: {e}")
        return 1
    finally:
        service.close()


if __name__ == "__main__":
    sys.exit(main())
