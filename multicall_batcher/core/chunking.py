"""
Chunking of call lists into bounded, order-preserving groups
"""
from typing import Sequence, TypeVar

T = TypeVar("T")


def chunk_inputs(chunk_size: int, inputs: Sequence[T]) -> list[list[T]]:
    """
    Split inputs into contiguous chunks of at most chunk_size items.

    An empty input gives no chunks. A non-positive chunk size, a single
    input or a chunk size larger than the input gives one chunk holding
    everything. Otherwise every chunk holds exactly chunk_size items except
    a trailing remainder chunk, which is omitted when the split is even.
    """
    if len(inputs) == 0:
        return []

    if chunk_size <= 0 or len(inputs) < 2 or chunk_size > len(inputs):
        return [list(inputs)]

    chunk_count, last_chunk_size = divmod(len(inputs), chunk_size)

    chunks = [
        list(inputs[i * chunk_size:(i + 1) * chunk_size])
        for i in range(chunk_count)
    ]

    if last_chunk_size > 0:
        start = chunk_count * chunk_size
        chunks.append(list(inputs[start:start + last_chunk_size]))

    return chunks
