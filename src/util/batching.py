"""Bounded write batches committed concurrently."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterator, List, Sequence, TypeVar
from src.models.util_types import BatchReport, StagedWrite
from src.util.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Split items into consecutive chunks of at most size elements."""
    if size < 1:
        raise ValueError("size must be at least 1")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def _commit_chunk(db, chunk: List[StagedWrite]):
    batch = db.batch()
    for write in chunk:
        batch.update(write.path, write.data)
    batch.commit()


def commit_in_batches(db, writes: Sequence[StagedWrite], max_batch_size: int, max_workers: int = 8) -> BatchReport:
    """Commit staged updates in batches of at most max_batch_size operations.

    Batches are committed concurrently. A failed batch is logged and
    reported; batches that already committed stay committed.

    Args:
        db: Store exposing batch()
        writes: Updates to apply
        max_batch_size: Operation ceiling per batch
        max_workers: Concurrent commits

    Returns:
        BatchReport listing committed and failed writes
    """
    report = BatchReport()
    if not writes:
        return report

    chunks = list(chunked(writes, max_batch_size))
    report.batches = len(chunks)

    with ThreadPoolExecutor(max_workers=min(max_workers, len(chunks))) as executor:
        future_to_chunk = {
            executor.submit(_commit_chunk, db, chunk): chunk
            for chunk in chunks
        }

        for future in as_completed(future_to_chunk):
            chunk = future_to_chunk[future]
            try:
                future.result()
                report.committed.extend(chunk)
            except Exception as e:
                logger.error(f"Batch of {len(chunk)} writes failed: {e}")
                report.failed.extend(chunk)

    logger.info(
        f"Committed {len(report.committed)}/{len(writes)} writes in {report.batches} batches"
    )
    return report
