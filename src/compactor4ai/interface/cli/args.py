from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from compactor4ai.domain.constants import DEFAULT_EXTENSION, MODE_TAGS
from compactor4ai.infra.logging import get_default_log_path

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the Compactor4AI CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="compactor4ai",
        description="Strip comments and minify source files for LLM contexts.",
    )

    # --- Inputs ---
    p.add_argument(
        "paths",
        nargs="*",
        help="Files or directories to process. Use '-' (or nothing) to read stdin.",
    )
    p.add_argument(
        "--ext",
        dest="stdin_extension",
        default=DEFAULT_EXTENSION,
        help="Extension used to pick the grammar for stdin input (default: txt).",
    )

    # --- Processing ---
    p.add_argument(
        "-m", "--mode",
        dest="mode",
        default=None,
        help=f"Processing mode: {', '.join(MODE_TAGS)}. Unknown values behave as 'raw'.",
    )
    p.add_argument(
        "--no-tokens",
        action="store_true",
        help="Skip BPE token counting in the summary.",
    )

    # --- Output ---
    p.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        default=None,
        help="Write processed files under this directory instead of stdout.",
    )
    p.add_argument(
        "--suffix",
        dest="output_suffix",
        default=None,
        help="Marker inserted before the extension of written files (e.g. '.min').",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print a machine-readable JSON report.",
    )
    p.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print per-file progress.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration for later runs.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also write logs to a rotating file (default location if no path is given).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.mode is not None:
        overrides["mode"] = args.mode
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    if args.output_suffix is not None:
        overrides["output_suffix"] = args.output_suffix
    if args.log_file is not None:
        overrides["log_file"] = args.log_file or get_default_log_path()

    if args.no_tokens:
        overrides["count_tokens"] = False
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides
