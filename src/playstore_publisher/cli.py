"""
Command line entry point.

    playstore-publisher publish --package-name com.example.app --track beta \\
        --release-file app-release.aab
    playstore-publisher update-listing --package-name com.example.app \\
        --metadata-path fastlane/metadata/android --dry-run

Every option falls back to the matching GitHub Actions input variable
(``INPUT_PACKAGE-NAME`` and so on), so the same command works as an
action entry point.
"""

import argparse
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from . import __version__
from .config import ListingOptions, PublishOptions, read_input
from .exceptions import ConfigurationError
from .utils import parse_bool
from .workflows import RunResult, publish_release, update_listing

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playstore-publisher",
        description="Publish builds and store listings to Google Play.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--service-account-json",
        default=read_input("service-account-json"),
        help="Service account JSON, plain or base64-encoded "
        "(default: $INPUT_SERVICE-ACCOUNT-JSON).",
    )
    common.add_argument(
        "--package-name",
        default=read_input("package-name"),
        help="Application package name, e.g. com.example.app.",
    )

    publish = subparsers.add_parser(
        "publish", parents=[common], help="Upload or promote a release to a track."
    )
    publish.add_argument("--track", default=read_input("track"), help="Target track.")
    publish.add_argument(
        "--release-file",
        default=read_input("release-files"),
        help="Path to the .aab or .apk to upload (upload mode).",
    )
    publish.add_argument(
        "--promote-track",
        default=read_input("promote-track"),
        help="Track to promote the latest release from (promote mode).",
    )
    publish.add_argument(
        "--promote-release-code",
        default=read_input("promote-release-code"),
        help="Version code to promote instead of the source track's latest.",
    )
    publish.add_argument(
        "--status",
        default=read_input("status"),
        choices=["draft", "inProgress", "halted", "completed"],
        help="Release status (default: completed).",
    )
    publish.add_argument(
        "--rollout-percentage",
        default=read_input("rollout-percentage"),
        help="Staged rollout percentage, 5-100.",
    )
    publish.add_argument(
        "--in-app-update-priority",
        default=read_input("in-app-update-priority"),
        help="In-app update priority, 0-5.",
    )
    publish.add_argument(
        "--whats-new-directory",
        default=read_input("whats-new-directory"),
        help="Directory of whatsnew-<locale> release note files.",
    )

    listing = subparsers.add_parser(
        "update-listing", parents=[common], help="Sync the store listing from a directory."
    )
    listing.add_argument(
        "--metadata-path",
        default=read_input("metadata-path"),
        help="Root of the metadata directory tree.",
    )
    listing.add_argument(
        "--dry-run",
        action="store_true",
        default=parse_bool(read_input("dry-run")),
        help="Validate the changes and discard them instead of committing.",
    )
    return parser


def write_outputs(outputs: Dict[str, str]) -> None:
    """Print outputs and append them to $GITHUB_OUTPUT when running as an action."""
    for name, value in outputs.items():
        print(f"{name}={value}")

    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        with open(output_file, "a", encoding="utf-8") as f:
            for name, value in outputs.items():
                f.write(f"{name}={value}\n")


def _run(args: argparse.Namespace) -> RunResult:
    if args.command == "publish":
        options = PublishOptions(
            service_account_json=args.service_account_json,
            package_name=args.package_name,
            track=args.track,
            release_file=args.release_file,
            promote_track=args.promote_track,
            promote_version_code=args.promote_release_code,
            status=args.status,
            rollout_percentage=args.rollout_percentage,
            update_priority=args.in_app_update_priority,
            whats_new_directory=args.whats_new_directory,
        )
        return publish_release(options)

    options = ListingOptions(
        service_account_json=args.service_account_json,
        package_name=args.package_name,
        metadata_path=args.metadata_path,
        dry_run=args.dry_run,
    )
    return update_listing(options)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = _run(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outputs = result.outputs()
    if args.command == "update-listing" and result.success:
        outputs["updated-components"] = json.dumps(result.updated_components)
    write_outputs(outputs)

    if not result.success:
        print(result.message, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
