"""
Chunked execution of large call lists
Runs one aggregate per chunk, strictly in order, with an optional blocking
cooldown between chunks to stay under RPC rate limits.
"""
import time
from datetime import timedelta
from typing import Callable, Sequence

from multicall_batcher.core.chunking import chunk_inputs
from multicall_batcher.core.exceptions import ChunkError
from multicall_batcher.core.network.call import BaseCall
from multicall_batcher.utils.logger import get_logger

logger = get_logger(__name__)

Aggregate = Callable[[Sequence[BaseCall]], list[BaseCall]]


def _cooldown_seconds(cooldown: float | timedelta) -> float:
    if isinstance(cooldown, timedelta):
        return cooldown.total_seconds()
    return float(cooldown)


def run_chunked(
    aggregate: Aggregate,
    chunk_size: int,
    cooldown: float | timedelta,
    calls: Sequence[BaseCall]
) -> list[BaseCall]:
    """
    Execute calls chunk by chunk

    Args:
        aggregate: Runs one chunk (aggregator mode with its options bound)
        chunk_size: Maximum calls per chunk, see chunk_inputs()
        cooldown: Pause before every chunk but the first (seconds or timedelta)
        calls: Call records, mutated in place

    Returns:
        All call records in input order

    Raises:
        ChunkError: on the first failing chunk; later chunks are skipped and
            the error carries the full original call list
    """
    pause = _cooldown_seconds(cooldown)
    chunks = chunk_inputs(chunk_size, calls)

    all_calls: list[BaseCall] = []
    for i, chunk in enumerate(chunks):
        if i > 0 and pause > 0:
            time.sleep(pause)

        logger.debug(f"Running chunk {i + 1}/{len(chunks)} ({len(chunk)} calls)")
        try:
            chunk = aggregate(chunk)
        except Exception as e:
            logger.warning(f"Call chunk [{i}] failed: {e}")
            raise ChunkError(i, e, calls=calls) from e
        all_calls.extend(chunk)

    return all_calls
