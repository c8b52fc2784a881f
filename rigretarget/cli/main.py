from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import yaml

from rigretarget.build import ConstraintBuilder
from rigretarget.capture import capture_constraints
from rigretarget.config import ConfigError, load_config
from rigretarget.diagnostics import dump_bindings
from rigretarget.paths import find_by_segments, split_path
from rigretarget.processing.armature import SHALLOW_POLICIES, detect_roots
from rigretarget.records import read_records, validate_records_file, write_records
from rigretarget.resolution.pipeline import ResolutionPipeline
from rigretarget.resolution.strategies import STRATEGY_ORDER, Reference
from rigretarget.rig_io import RigFormatError, load_rig, save_rig
from rigretarget.schema import SchemaValidationError

# Errors that are reported as a failed command rather than a crash.
CLI_ERRORS = (
    SchemaValidationError,
    RigFormatError,
    ConfigError,
    FileNotFoundError,
    yaml.YAMLError,
)


def _find_armature(rig, armature_path):
    if not armature_path:
        return None
    node = find_by_segments(rig, split_path(armature_path))
    if node is None:
        raise RigFormatError(f"Armature '{armature_path}' not found under '{rig.name}'")
    return node


def _setup_capture_parser(subparsers):
    """Set up the capture command parser."""
    parser = subparsers.add_parser(
        "capture", help="Captures the constraints of a rig into a record file."
    )
    parser.add_argument("rig", type=Path, help="The source rig YAML file.")
    parser.add_argument(
        "--output", required=True, type=Path, help="The output HDF5 record file."
    )
    parser.add_argument(
        "--armature",
        type=str,
        help="Optional path of the source armature root, relative to the rig root.",
    )


def _setup_build_parser(subparsers):
    """Set up the build command parser."""
    parser = subparsers.add_parser(
        "build", help="Rebuilds captured constraints on one or more destination rigs."
    )
    parser.add_argument("records", type=Path, help="The HDF5 record file.")
    parser.add_argument(
        "--rig",
        required=True,
        nargs="+",
        type=Path,
        help="Destination rig YAML file(s).",
    )
    parser.add_argument(
        "--output-dir",
        required=True,
        type=Path,
        help="Directory the rebuilt rigs are written to.",
    )
    parser.add_argument(
        "--armature",
        type=str,
        help="Optional armature root path inside each destination (default: detect).",
    )
    parser.add_argument("--config", type=Path, help="Optional build config YAML file.")
    parser.add_argument(
        "--skip-strategy",
        nargs="+",
        choices=STRATEGY_ORDER,
        default=[],
        help="Resolution strategies to switch off.",
    )
    parser.add_argument(
        "--keep-disabled",
        action="store_true",
        help="Leave rebuilt constraints inactive after activation.",
    )
    parser.add_argument(
        "--policy",
        choices=SHALLOW_POLICIES,
        help="What to do when the selected armature is the shallowest candidate.",
    )


def _setup_detect_parser(subparsers):
    """Set up the detect command parser."""
    parser = subparsers.add_parser(
        "detect", help="Lists the armature root candidates of a rig."
    )
    parser.add_argument("rig", type=Path, help="The rig YAML file.")


def _setup_resolve_parser(subparsers):
    """Set up the resolve command parser."""
    parser = subparsers.add_parser(
        "resolve", help="Resolves a single name/path reference on a rig."
    )
    parser.add_argument("rig", type=Path, help="The rig YAML file.")
    parser.add_argument("--name", required=True, help="The recorded node name.")
    parser.add_argument("--path", default="", help="The recorded path from the armature.")
    parser.add_argument(
        "--armature",
        type=str,
        help="Optional armature root path inside the rig (default: detect).",
    )
    parser.add_argument(
        "--skip-strategy",
        nargs="+",
        choices=STRATEGY_ORDER,
        default=[],
        help="Resolution strategies to switch off.",
    )


def _setup_dump_parser(subparsers):
    """Set up the dump command parser."""
    parser = subparsers.add_parser(
        "dump", help="Logs every constraint binding of a rig."
    )
    parser.add_argument("rig", type=Path, help="The rig YAML file.")


def _setup_validate_parser(subparsers):
    """Set up the validate command parser."""
    parser = subparsers.add_parser(
        "validate", help="Validates a record file against the record schema."
    )
    parser.add_argument("records", type=Path, help="The HDF5 record file.")
    parser.add_argument(
        "--strict", action="store_true", help="Fail on the first schema problem."
    )


def _handle_capture_command(args):
    """Handle the capture command."""
    logging.basicConfig(level=logging.INFO)
    try:
        rig = load_rig(args.rig)
        armature = _find_armature(rig, args.armature)
        records = capture_constraints(rig, armature)
        args.output.parent.mkdir(parents=True, exist_ok=True)
        write_records(args.output, records)
    except CLI_ERRORS as e:
        logging.error(f"Capture failed: {e}")
        sys.exit(1)


def _build_options(args):
    options = load_config(args.config)
    if args.skip_strategy:
        options = options.without_strategies(args.skip_strategy)
    if args.keep_disabled:
        options = replace(options, keep_disabled_after_build=True)
    if args.policy:
        options = replace(options, shallow_armature_policy=args.policy)
    return options


def _handle_build_command(args):
    """Handle the build command."""
    logging.basicConfig(level=logging.INFO)
    try:
        options = _build_options(args)
        records = read_records(args.records)
        rigs = [load_rig(path) for path in args.rig]
    except CLI_ERRORS as e:
        logging.error(f"Build failed: {e}")
        sys.exit(1)

    builder = ConstraintBuilder(options)
    reports = builder.build_many(rigs, records, armature_path=args.armature or "")

    args.output_dir.mkdir(parents=True, exist_ok=True)
    for path, rig, report in zip(args.rig, rigs, reports):
        logging.info(report.summary())
        if report.skipped:
            continue
        save_rig(rig, args.output_dir / path.name)

    skipped = sum(1 for r in reports if r.skipped)
    if skipped:
        logging.warning(f"{skipped} of {len(reports)} destination(s) were skipped.")


def _handle_detect_command(args):
    """Handle the detect command."""
    logging.basicConfig(level=logging.INFO)
    try:
        rig = load_rig(args.rig)
    except CLI_ERRORS as e:
        logging.error(f"Detect failed: {e}")
        sys.exit(1)

    detection = detect_roots(rig)
    if not detection:
        logging.error(f"No armature root under '{rig.name}': {detection.reason}")
        sys.exit(1)
    for i, candidate in enumerate(detection.candidates):
        kind = "humanoid" if candidate.humanoid else "animator"
        logging.info(
            f"[{i}] {candidate.label} (root='{candidate.root.name}', "
            f"score={candidate.score}, {kind})"
        )


def _handle_resolve_command(args):
    """Handle the resolve command."""
    logging.basicConfig(level=logging.INFO)
    try:
        rig = load_rig(args.rig)
        armature = _find_armature(rig, args.armature)
    except CLI_ERRORS as e:
        logging.error(f"Resolve failed: {e}")
        sys.exit(1)

    if armature is None:
        armature, reason = ConstraintBuilder().select_armature(rig)
        if armature is None:
            logging.error(f"No armature root under '{rig.name}': {reason}")
            sys.exit(1)

    strategies = [s for s in STRATEGY_ORDER if s not in args.skip_strategy]
    resolution = ResolutionPipeline(strategies).resolve(
        armature, Reference(name=args.name, path=args.path)
    )
    if resolution is None:
        logging.warning(f"Unresolved: name='{args.name}' path='{args.path}'")
        sys.exit(1)
    logging.info(
        f"Resolved '{args.name}' -> '{resolution.node.name}' via {resolution.strategy}"
    )


def _handle_dump_command(args):
    """Handle the dump command."""
    logging.basicConfig(level=logging.INFO)
    try:
        rig = load_rig(args.rig)
    except CLI_ERRORS as e:
        logging.error(f"Dump failed: {e}")
        sys.exit(1)
    dump_bindings(rig)


def _handle_validate_command(args):
    """Handle the validate command."""
    logging.basicConfig(level=logging.INFO)
    logging.info(f"Validating {args.records} against the record schema...")
    try:
        count = validate_records_file(args.records, strict=args.strict)
    except CLI_ERRORS as e:
        logging.error("Validation Failed: The record file is not compliant.")
        logging.error(f"Error details: {e}")
        sys.exit(1)
    logging.info(f"Validation complete: {count} record(s) checked.")


def main():
    """The main entry point for the rigretarget command-line interface."""
    parser = argparse.ArgumentParser(
        description="Retargets rig constraints between skeletons."
    )
    subparsers = parser.add_subparsers(
        dest="command", required=True, help="Available commands"
    )

    # Set up command parsers
    _setup_capture_parser(subparsers)
    _setup_build_parser(subparsers)
    _setup_detect_parser(subparsers)
    _setup_resolve_parser(subparsers)
    _setup_dump_parser(subparsers)
    _setup_validate_parser(subparsers)

    args = parser.parse_args()

    # Handle commands
    if args.command == "capture":
        _handle_capture_command(args)
    elif args.command == "build":
        _handle_build_command(args)
    elif args.command == "detect":
        _handle_detect_command(args)
    elif args.command == "resolve":
        _handle_resolve_command(args)
    elif args.command == "dump":
        _handle_dump_command(args)
    elif args.command == "validate":
        _handle_validate_command(args)


if __name__ == "__main__":
    main()
