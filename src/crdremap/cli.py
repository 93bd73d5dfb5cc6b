"""crdremap CLI: remap CRD manifests to the API version they were authored against."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path

from crdremap.errors import ManifestError, ProjectionError


def main():
    """Main CLI entry point for crdremap commands."""
    # Get version for --version argument (handle PackageNotFoundError)
    try:
        crdremap_version = get_version("crdremap")
    except PackageNotFoundError:
        crdremap_version = "dev"

    parser = argparse.ArgumentParser(
        prog="crdremap",
        description="crdremap: demote legacy CustomResourceDefinitions to apiextensions.k8s.io/v1beta1 before restore"
    )
    parser.add_argument("--version", action="version", version=f"crdremap {crdremap_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--in",
        dest="input",
        type=Path,
        required=True,
        help="Path to a .yaml/.yml or .json manifest"
    )
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # remap command
    remap_parser = subparsers.add_parser(
        "remap",
        help="Remap CRDs in a manifest and write the result",
        parents=[parent_parser]
    )
    remap_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output path (defaults to stdout)"
    )
    remap_parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default=None,
        help="Output format (defaults to the input format)"
    )
    remap_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write a JSON report of remap decisions to this path"
    )

    # check command
    subparsers.add_parser(
        "check",
        help="Print the remap decision for each CRD without writing output",
        parents=[parent_parser]
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    from crdremap._internal.io.manifests import dump_manifest, load_manifest, write_report
    from crdremap.api import remap_documents

    try:
        manifest = load_manifest(args.input)
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        # Documents are remapped in place, so manifest.roots reflects the result
        result = remap_documents(manifest.documents, logger=logging.getLogger("crdremap"))
    except ProjectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "check":
        if not args.quiet:
            for decision in result.decisions:
                status = "REMAP" if decision.remapped else "KEEP"
                reasons = ",".join(r.value for r in decision.reasons) or "-"
                print(f"{status}\t{decision.crd_name}\t{decision.api_version}\t{reasons}")
            print(f"CRDs: {len(result.decisions)}  Remapped: {result.remapped_count}  Skipped: {result.skipped}")
        return

    fmt = args.format or ("json" if args.input.suffix == ".json" else "yaml")
    try:
        content = dump_manifest(manifest, fmt)
        if args.out:
            args.out.parent.mkdir(parents=True, exist_ok=True)
            args.out.write_text(content, encoding="utf-8")
            if not args.quiet:
                print(f"[OK] Remapped {result.remapped_count} of {len(result.decisions)} CRDs -> {args.out}", file=sys.stderr)
        else:
            sys.stdout.write(content)

        if args.report:
            write_report([d.model_dump(mode="json") for d in result.decisions], args.report)
    except (ManifestError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
