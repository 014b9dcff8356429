from __future__ import annotations

"""
Sequential Batch Processing Driver.

Applies one processing mode to an ordered collection of records and reports
cumulative progress after every record. Records are processed strictly in
input order on a single thread so that progress listeners observe
monotonically increasing counters.

The whole batch can be offloaded to a background executor as a single unit
of work; failures of that execution context surface as one terminal
BatchProcessingError and no partial results are returned.
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Union

from compactor4ai.core.processing.comments import byte_length
from compactor4ai.core.processing.processor import extension_from_name, process
from compactor4ai.domain.processing_models import (
    BatchProcessingError,
    FileRecord,
    ProcessedFile,
    ProcessingMode,
    ProcessingProgress,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProcessingProgress], None]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def process_batch(
        records: Sequence[FileRecord],
        mode: Union[str, ProcessingMode, None],
        on_progress: Optional[ProgressCallback] = None,
) -> List[ProcessedFile]:
    """
    Transform every record in order and report progress after each one.

    Args:
        records: Ordered input records.
        mode: Processing mode tag or enum; unknown tags behave as "raw".
        on_progress: Optional listener invoked once per record.

    Returns:
        List[ProcessedFile]: One result per record, in input order.
    """
    resolved = ProcessingMode.from_tag(mode)
    total_files_count = len(records)
    total_bytes = sum(byte_length(r.content) for r in records)

    logger.info(
        f"Batch started: {total_files_count} file(s), {total_bytes} bytes, mode '{resolved.value}'."
    )

    results: List[ProcessedFile] = []
    processed_bytes = 0
    bytes_saved = 0

    for index, record in enumerate(records, start=1):
        extension = extension_from_name(record.name)
        content = process(record.content, resolved, extension)

        original_len = byte_length(record.content)
        saved = original_len - byte_length(content)
        processed_bytes += original_len
        bytes_saved += saved

        logger.debug(f"Processed {record.name} [{extension}]: {saved:+d} bytes saved")

        results.append(ProcessedFile(id=record.id, content=content))

        if on_progress is not None:
            _emit_progress(on_progress, ProcessingProgress(
                current_file_name=record.name,
                processed_files_count=index,
                total_files_count=total_files_count,
                processed_bytes=processed_bytes,
                total_bytes=total_bytes,
                bytes_saved=bytes_saved,
            ))

    logger.info(f"Batch finished: {len(results)} file(s), {bytes_saved} bytes saved.")
    return results


def run_batch_in_background(
        records: Sequence[FileRecord],
        mode: Union[str, ProcessingMode, None],
        on_progress: Optional[ProgressCallback] = None,
        *,
        executor: Optional[Executor] = None,
) -> Future[List[ProcessedFile]]:
    """
    Submit a whole batch as one unit of work to a background executor.

    When no executor is supplied a dedicated single-thread pool is created
    and shut down once the batch completes.

    Args:
        records: Ordered input records.
        mode: Processing mode tag or enum.
        on_progress: Optional listener, invoked from the worker thread.
        executor: Optional executor to reuse.

    Returns:
        Future[List[ProcessedFile]]: Future resolving to the batch results.
    """
    snapshot = list(records)
    if executor is not None:
        return executor.submit(process_batch, snapshot, mode, on_progress)

    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="BatchWorker")
    try:
        return pool.submit(process_batch, snapshot, mode, on_progress)
    finally:
        # Pending work still runs; the pool thread exits afterwards
        pool.shutdown(wait=False)


def process_batch_blocking(
        records: Sequence[FileRecord],
        mode: Union[str, ProcessingMode, None],
        on_progress: Optional[ProgressCallback] = None,
        *,
        executor: Optional[Executor] = None,
) -> List[ProcessedFile]:
    """
    Run a batch in the background and wait for its completion.

    Args:
        records: Ordered input records.
        mode: Processing mode tag or enum.
        on_progress: Optional listener invoked once per record.
        executor: Optional executor to reuse.

    Returns:
        List[ProcessedFile]: One result per record, in input order.

    Raises:
        BatchProcessingError: If the background execution fails for any reason.
    """
    try:
        future = run_batch_in_background(records, mode, on_progress, executor=executor)
        return future.result()
    except Exception as e:
        logger.error(f"Batch processing failed: {e}")
        raise BatchProcessingError(f"Processing failed: {e}", cause=e) from e


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _emit_progress(on_progress: ProgressCallback, progress: ProcessingProgress) -> None:
    """Deliver a progress event; a failing listener never aborts the batch."""
    try:
        on_progress(progress)
    except Exception as e:
        logger.warning(f"Progress listener failed on {progress.current_file_name}: {e}")
