"""Command-line entry point for the Crowdin file sync tool."""

import argparse
import sys

from crowdin_client.api import UPDATE_OPTIONS
from crowdin_client.cli import run

PARSE_ERROR_EXIT_CODE = 1


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 whenever parsing stops early.

    Usage errors and help requests both end the process without running
    an operation.
    """

    def exit(self, status: int = 0, message: str | None = None) -> None:
        super().exit(PARSE_ERROR_EXIT_CODE, message)


def build_parser() -> ArgumentParser:
    """Build the parser for the ``updatefiles`` and ``addfiles`` verbs."""
    parser = ArgumentParser(
        description="Upload localization files to a Crowdin project",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="appsettings.json",
        help="Path to the JSON settings file (default: appsettings.json)",
    )
    parser.add_argument("--api", help="Crowdin API base URL")
    parser.add_argument("--files", help="Semicolon separated list of files to update")
    parser.add_argument("--project-id", help="Crowdin project identifier")
    parser.add_argument("--project-key", help="Crowdin project API key")

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=ArgumentParser,
    )

    update = subparsers.add_parser(
        "updatefiles",
        help="Update files in Crowdin. Will use the configured file list "
        "or files passed in as arguments",
    )
    update.add_argument(
        "-f",
        "--file",
        dest="paths",
        action="append",
        default=[],
        help="Path to a file to upload",
    )
    update.add_argument(
        "--update-option",
        choices=UPDATE_OPTIONS,
        help="How Crowdin treats existing translations of changed strings",
    )

    add = subparsers.add_parser("addfiles", help="Add files to Crowdin")
    add.add_argument(
        "-f",
        "--file",
        dest="paths",
        action="append",
        default=[],
        help="Path(s) to a file to upload",
    )
    return parser


def config_overrides(args: argparse.Namespace) -> dict[str, str]:
    """Collect configuration values given as global command-line options."""
    candidates = {
        "api": args.api,
        "files": args.files,
        "project:ProjectId": args.project_id,
        "project:ProjectKey": args.project_key,
    }
    return {key: value for key, value in candidates.items() if value is not None}


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the selected Crowdin operation."""
    parser = build_parser()
    args = parser.parse_args(argv)
    return run(
        command=args.command,
        paths=args.paths,
        settings_path=args.config,
        overrides=config_overrides(args),
        update_option=getattr(args, "update_option", None),
    )


if __name__ == "__main__":
    sys.exit(main())
