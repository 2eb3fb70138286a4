from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the `multilog` log pipe and translates
the parsed namespace into a backend description.
"""

import argparse
from typing import Any, Dict, List

from multilog.config import ROTATE_MODES, BackendConfig
from multilog.domain.constants import DEFAULT_BACKEND_NAME
from multilog.domain.levels import LogType

SEVERITIES: Dict[str, LogType] = {
    "fatal": LogType.FATAL,
    "error": LogType.ERROR,
    "warning": LogType.WARNING,
    "info": LogType.INFO,
    "debug": LogType.DEBUG,
}

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the multilog CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="multilog",
        description="Write stdin lines (or --message values) to a leveled, rotating log.",
    )

    # --- Sink ---
    p.add_argument(
        "-o", "--output",
        dest="output",
        default="stdout",
        help="Log file path, or 'stdout' / 'stderr' (default: stdout).",
    )
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="JSON file describing backends. Overrides the sink options.",
    )

    # --- Filtering & Severity ---
    p.add_argument(
        "-l", "--level",
        default="all",
        help="Backend level: fatal, error, warn, warning, info, debug (default: all).",
    )
    p.add_argument(
        "-s", "--severity",
        choices=sorted(SEVERITIES),
        default="info",
        help="Severity of every written line (default: info).",
    )
    p.add_argument(
        "-m", "--message",
        dest="messages",
        action="append",
        default=None,
        help="Message to write instead of reading stdin. Repeatable.",
    )

    # --- Rotation ---
    p.add_argument(
        "--rotate",
        choices=ROTATE_MODES,
        default=None,
        help="Rotate the output file by calendar day, hour or size.",
    )
    p.add_argument(
        "--rotate-size",
        dest="rotate_size",
        type=int,
        default=0,
        help="Size threshold in bytes for --rotate size.",
    )

    # --- Rendering ---
    p.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors.",
    )
    p.add_argument(
        "--flags",
        default="date,time",
        help="Line metadata: date,time,microseconds,longfile,shortfile,utc,msgprefix.",
    )
    p.add_argument(
        "--prefix",
        default="",
        help="Text placed in front of every line.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--crash-log",
        dest="crash_log",
        default=None,
        help="Redirect the process diagnostic stream to this file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate diagnostic verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_backend_dict(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a raw backend description.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Mapping accepted by BackendConfig.from_dict.
    """
    data: Dict[str, Any] = {
        "name": DEFAULT_BACKEND_NAME,
        "output": args.output,
        "level": args.level,
        "colored": not args.no_color,
        "flags": args.flags,
        "prefix": args.prefix,
    }
    if args.rotate:
        data["rotate"] = args.rotate
        data["rotate_size"] = args.rotate_size
    return data


def args_to_backend_configs(args: argparse.Namespace) -> List[BackendConfig]:
    """
    Raises:
        ConfigError: If the options do not form a valid backend.
    """
    return [BackendConfig.from_dict(args_to_backend_dict(args))]
