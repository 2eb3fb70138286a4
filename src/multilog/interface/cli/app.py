from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Runs the `multilog` log pipe: bootstrap diagnostics, optionally redirect
the crash log, build the backends, then write every input line through
the registry. Fatal severity is treated as a signal: the first fatal line
is written and the command exits with FATAL_EXIT_CODE.
"""

import sys
from typing import Iterable, List, Optional, TextIO

from multilog.config import build_registry, load_config
from multilog.core.registry import Registry
from multilog.domain.constants import FATAL_EXIT_CODE
from multilog.domain.errors import ConfigError
from multilog.domain.levels import LogType
from multilog.infra.fs import redirect_crash_log
from multilog.infra.logging import DiagnosticsConfig, configure_logging, get_logger
from multilog.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.
        stdin: Input stream. Defaults to sys.stdin.

    Returns:
        int: Process exit code.
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Diagnostics bootstrap
    configure_logging(DiagnosticsConfig(level="DEBUG" if args.debug else "WARNING"))

    if args.crash_log and not redirect_crash_log(args.crash_log):
        logger.warning(f"Continuing without crash log at {args.crash_log}")

    # 3. Backend construction
    try:
        if args.config_path:
            configs = load_config(args.config_path)
        else:
            configs = cli_args.args_to_backend_configs(args)
        registry = build_registry(configs)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except OSError as e:
        print(f"ERROR: cannot open log output: {e}", file=sys.stderr)
        return EXIT_CONFIG

    logger.debug(f"Writing through backends: {', '.join(registry.names())}")

    # 4. Pipe phase
    log_type = cli_args.SEVERITIES[args.severity]
    if args.messages is not None:
        lines: Iterable[str] = args.messages
    else:
        lines = stdin if stdin is not None else sys.stdin

    try:
        return _pipe(registry, log_type, lines)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _pipe(registry: Registry, log_type: LogType, lines: Iterable[str]) -> int:
    for raw in lines:
        line = raw.rstrip("\r\n")
        if registry.emit(log_type, (line,)):
            return FATAL_EXIT_CODE
    return EXIT_OK
