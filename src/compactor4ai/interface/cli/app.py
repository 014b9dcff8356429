from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, resolution of the
configuration hierarchy (defaults, persisted file, command-line overrides),
input collection from files, directories or stdin, batch execution and
result rendering either as processed files on disk or on stdout.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from compactor4ai.core.pipeline.batch import process_batch_blocking
from compactor4ai.core.pipeline.validator import validate_config
from compactor4ai.core.processing.comments import byte_length
from compactor4ai.core.processing.tokenizer import TokenizerError, count_tokens, get_encoding_name
from compactor4ai.core.services.scanner import read_files_from_paths, to_records
from compactor4ai.domain.config import get_default_config, load_config, save_config
from compactor4ai.domain.processing_models import (
    BatchProcessingError,
    FileRecord,
    FileReport,
    ProcessedFile,
    ProcessingProgress,
    RunSummary,
)
from compactor4ai.infra.fs import normalize_path, output_path_for, safe_mkdir
from compactor4ai.infra.logging import LoggingConfig, configure_logging, get_logger
from compactor4ai.interface.cli import args as cli_args

logger = get_logger(__name__)

STDIN_MARKER = "-"

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 2 bad input, 130 interrupted).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console only until the configuration is known)
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=None), force=True)

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (defaults vs persisted state)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 4. Map and merge command-line overrides
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)

    # 5. Validation and normalization
    clean_conf, warnings = validate_config(raw_conf)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # 6. Re-bootstrap logging with the effective settings
    configure_logging(
        LoggingConfig(
            level=clean_conf["log_level"],
            console=True,
            log_file=clean_conf["log_file"] or None,
        ),
        force=True,
    )

    if args.save_config:
        if not save_config(clean_conf):
            print("ERROR: Could not save configuration.", file=sys.stderr)
            return 1
        logger.info("Configuration saved.")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 7. Pre-flight input verification
    paths: List[str] = list(args.paths) or [STDIN_MARKER]
    missing = [p for p in paths if p != STDIN_MARKER and not os.path.exists(p)]
    if missing:
        for p in missing:
            msg = f"Input path does not exist: {p}"
            logger.error(msg)
            print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    # 8. Input collection and batch execution
    try:
        records, sources = _collect_inputs(paths, args.stdin_extension)
        if not records:
            print("ERROR: No text files found in the given paths.", file=sys.stderr)
            return 2

        progress = None if (args.quiet or args.json_output) else _print_progress
        results = process_batch_blocking(records, clean_conf["mode"], progress)
    except KeyboardInterrupt:
        msg = "Operation interrupted by user."
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return 130
    except BatchProcessingError as e:
        logger.critical(f"Processing failed: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 9. Output phase
    summary = _emit_results(records, sources, results, clean_conf, echo=not args.json_output)
    if clean_conf["count_tokens"]:
        _attach_token_counts(summary, records, results)

    # 10. Rendering phase
    if args.json_output:
        print(json.dumps(asdict(summary), ensure_ascii=False, indent=2))
    elif not args.quiet:
        # Keep stdout clean when it carries the processed content
        stream = sys.stdout if clean_conf["output_dir"] else sys.stderr
        _print_human_summary(summary, stream)

    return 0 if summary.ok else 1

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = ["mode", "count_tokens", "output_dir", "output_suffix", "log_level", "log_file"]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# INPUT COLLECTION
# -----------------------------------------------------------------------------

def _collect_inputs(paths: List[str], stdin_extension: str) -> Tuple[List[FileRecord], List[str]]:
    """
    Build batch records from stdin and filesystem paths.

    Args:
        paths: Raw CLI paths; '-' stands for stdin.
        stdin_extension: Extension selecting the grammar of stdin content.

    Returns:
        Tuple[List[FileRecord], List[str]]: Records and their display paths, aligned.
    """
    records: List[FileRecord] = []
    sources: List[str] = []

    for path in paths:
        if path == STDIN_MARKER:
            ext = (stdin_extension or "txt").lstrip(".")
            records.append(FileRecord(id=STDIN_MARKER, name=f"stdin.{ext}", content=sys.stdin.read()))
            sources.append(STDIN_MARKER)
            continue

        files = read_files_from_paths([path])
        skipped = sum(1 for f in files if not f.is_text)
        if skipped:
            logger.info(f"Skipping {skipped} non-text file(s) under {path}")
        text_files = [f for f in files if f.is_text]
        records.extend(to_records(text_files))
        sources.extend(f.rel_path for f in text_files)

    return records, sources

# -----------------------------------------------------------------------------
# OUTPUT
# -----------------------------------------------------------------------------

def _emit_results(
        records: List[FileRecord],
        sources: List[str],
        results: List[ProcessedFile],
        conf: Dict[str, Any],
        echo: bool = True,
) -> RunSummary:
    """
    Write processed contents to the output directory or to stdout.

    Args:
        records: Batch inputs.
        sources: Display paths aligned with records.
        results: Batch outputs aligned with records.
        conf: Validated configuration.
        echo: Print contents to stdout when no output directory is set.

    Returns:
        RunSummary: Per-file outcomes and byte totals.
    """
    output_dir = normalize_path(conf["output_dir"], os.curdir) if conf["output_dir"] else ""
    summary = RunSummary(ok=True, mode=conf["mode"])
    to_stdout = not output_dir
    multiple = len(results) > 1

    for record, source, result in zip(records, sources, results):
        report = FileReport(
            source=source,
            bytes_in=byte_length(record.content),
            bytes_out=byte_length(result.content),
        )

        if to_stdout:
            report.content = result.content
            if echo:
                _echo(result.content, source if multiple else None)
        else:
            rel_name = record.name if source == STDIN_MARKER else source
            report.output_path = output_path_for(output_dir, rel_name, conf["output_suffix"])
            report.error = _write_output(report.output_path, result.content)
            if report.error:
                summary.ok = False

        summary.files.append(report)
        summary.bytes_in += report.bytes_in
        summary.bytes_out += report.bytes_out

    sys.stdout.flush()
    return summary


def _echo(content: str, header: Optional[str]) -> None:
    """Print one processed text, preceded by its source name in multi-file runs."""
    if header is not None:
        sys.stdout.write(f"==> {header} <==\n")
    sys.stdout.write(content)
    if not content.endswith("\n"):
        sys.stdout.write("\n")


def _write_output(path: str, content: str) -> Optional[str]:
    """Write one processed file, returning an error message on failure."""
    ok, err = safe_mkdir(os.path.dirname(path))
    if not ok:
        logger.error(f"Cannot create output directory for {path}: {err}")
        return err

    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        return str(e)

    logger.debug(f"Wrote {path}")
    return None


def _attach_token_counts(summary: RunSummary, records: List[FileRecord], results: List[ProcessedFile]) -> None:
    """Fill in BPE token totals, leaving them empty if no vocabulary is available."""
    try:
        summary.tokens_in = sum(count_tokens(r.content) for r in records)
        summary.tokens_out = sum(count_tokens(r.content) for r in results)
        summary.tokenizer = get_encoding_name()
    except TokenizerError as e:
        logger.warning(f"Token counting unavailable: {e}")
        summary.tokens_in = None
        summary.tokens_out = None

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_progress(progress: ProcessingProgress) -> None:
    """Report per-file progress on stderr."""
    print(
        f"[{progress.processed_files_count}/{progress.total_files_count}] "
        f"{progress.current_file_name} ({progress.fraction:.0%})",
        file=sys.stderr,
    )


def _print_human_summary(summary: RunSummary, stream: Any) -> None:
    """
    Format and print the run summary.

    Args:
        summary: The run summary to render.
        stream: Destination text stream.
    """
    print(f"Mode: {summary.mode}", file=stream)
    print(f"Files processed: {len(summary.files)}", file=stream)

    if summary.bytes_in > 0:
        ratio = summary.bytes_saved / summary.bytes_in * 100
        print(
            f"Bytes: {summary.bytes_in:,} -> {summary.bytes_out:,} "
            f"({summary.bytes_saved:+,} saved, {ratio:.1f}%)",
            file=stream,
        )

    if summary.tokens_in is not None and summary.tokens_out is not None:
        print(
            f"Tokens ({summary.tokenizer}): {summary.tokens_in:,} -> {summary.tokens_out:,} "
            f"({summary.tokens_in - summary.tokens_out:+,} saved)",
            file=stream,
        )

    written = [f for f in summary.files if f.output_path]
    if written:
        print("\nGenerated files:", file=stream)
        for f in written:
            status = f"FAILED ({f.error})" if f.error else f.output_path
            print(f"  - {f.source}: {status}", file=stream)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
