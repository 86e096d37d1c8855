"""Command-line entry point: generate or verify Traefik configuration."""

from __future__ import annotations

import argparse
import os
import sys
import time
from collections.abc import Sequence

from .settings import (
    SettingsError,
    generate_mapping_config,
    generate_traefik_config,
    parse_l7_settings,
    parse_l7_settings_file,
)
from .verify import MAPPING_FILE_NAME, TRAEFIK_FILE_NAME, verify_with_mappings
from .yaml_writer import write_mapping_config, write_traefik_config

_VERIFY_USAGE = (
    "Usage: traefik7 -y -i <l7_settings_file> -m <mapping_folder>",
    "       traefik7 -y -m <mapping_folder> (read from stdin)",
    "       echo 'commands' | traefik7 -y -m <mapping_folder>",
)

_USAGE = (
    "Usage: traefik7 [-i] <l7_settings_file>",
    "       traefik7 -y -i <l7_settings_file> -m <mapping_folder>  (verification mode)",
    "       traefik7 -o [-i] <l7_settings_file>  (output to stdout)",
    "       traefik7 [-o] (read from stdin)",
    "       echo 'commands' | traefik7 [-o]",
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="traefik7",
        description="Convert load-balancer L7 settings into Traefik services and mappings.",
    )
    parser.add_argument(
        "-y",
        dest="verify",
        action="store_true",
        help="Verify mode - perform verification checks on the L7 settings file and mapping folder",
    )
    parser.add_argument(
        "-o",
        dest="output",
        action="store_true",
        help="Output mode - print mappings to stdout instead of writing to files",
    )
    parser.add_argument(
        "-i",
        dest="input_file",
        default="",
        help="Input F5 settings file (use '-' or omit for stdin)",
    )
    parser.add_argument(
        "-m",
        dest="mapping_folder",
        default="",
        help="Mapping folder containing traefik-services.yaml and mapping.yaml "
        "(required for verification mode)",
    )
    parser.add_argument("files", nargs="*", help=argparse.SUPPRESS)
    return parser


def _print_lines(lines: Sequence[str]) -> None:
    for line in lines:
        print(line)


def _stdin_is_piped() -> bool:
    """Return True when standard input is a pipe or redirect, not a terminal.

    Raises OSError when standard input is unavailable.
    """
    stdin = sys.stdin
    if stdin is None:
        raise OSError("standard input is not available")
    try:
        return not stdin.isatty()
    except ValueError as exc:
        raise OSError(str(exc)) from exc


def _run_verify(input_file: str, mapping_folder: str) -> int:
    if not mapping_folder:
        print("Error: Mapping folder (-m) is required for verification mode")
        print()
        _print_lines(_VERIFY_USAGE)
        return 1

    if input_file in ("", "-"):
        try:
            piped = _stdin_is_piped()
        except OSError as exc:
            print(f"Error checking stdin: {exc}")
            return 1
        if not piped:
            print("Error: No input provided (stdin is empty and no input file specified)")
            print()
            _print_lines(_VERIFY_USAGE)
            return 1
        source = sys.stdin
        verified = verify_with_mappings(source, mapping_folder)
    else:
        verified = verify_with_mappings(input_file, mapping_folder)

    if not verified:
        print("Enhanced verification failed")
        return 1
    print("Enhanced verification passed")
    return 0


def _write_output_dir(traefik_config, mapping_config) -> int:
    output_dir = time.strftime("%Y%m%d%H%M")
    try:
        os.makedirs(output_dir, mode=0o755, exist_ok=True)
    except OSError as exc:
        print(f"Error creating output directory {output_dir}: {exc}")
        return 1

    traefik_path = os.path.join(output_dir, TRAEFIK_FILE_NAME)
    try:
        with open(traefik_path, "w", encoding="utf-8") as stream:
            write_traefik_config(stream, traefik_config)
    except OSError as exc:
        print(f"Error creating {traefik_path}: {exc}")
        return 1

    mapping_path = os.path.join(output_dir, MAPPING_FILE_NAME)
    try:
        with open(mapping_path, "w", encoding="utf-8") as stream:
            write_mapping_config(stream, mapping_config)
    except OSError as exc:
        print(f"Error creating {mapping_path}: {exc}")
        return 1

    print(f"Successfully generated files in directory: {output_dir}")
    print(f"  - {traefik_path}")
    print(f"  - {mapping_path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the process exit status."""
    args = _build_parser().parse_args(argv)

    if args.verify:
        return _run_verify(args.input_file, args.mapping_folder)

    filename = ""
    if args.input_file in ("", "-"):
        if args.files:
            filename = args.files[0]
        else:
            try:
                piped = _stdin_is_piped()
            except OSError:
                piped = False
            if not piped:
                _print_lines(_USAGE)
                return 1
    else:
        filename = args.input_file

    try:
        if filename:
            settings = parse_l7_settings_file(filename)
        else:
            settings = parse_l7_settings(sys.stdin)
    except (SettingsError, OSError) as exc:
        print(f"Error parsing L7 settings: {exc}")
        return 1

    traefik_config = generate_traefik_config(
        settings.servers,
        settings.vservers,
        settings.service_group_defs,
        settings.service_groups,
    )
    mapping_config = generate_mapping_config(
        settings.vservers, settings.service_group_defs, settings.service_groups
    )

    if args.output:
        print("# Traefik Services Configuration")
        sys.stdout.flush()
        write_traefik_config(sys.stdout, traefik_config)
        print()
        print("# Mapping Configuration")
        write_mapping_config(sys.stdout, mapping_config)
        return 0

    return _write_output_dir(traefik_config, mapping_config)


if __name__ == "__main__":
    raise SystemExit(main())