"""
Exception types raised by the batching engine

Every error carries the call records that were handed to the failing
operation, so the invoker can still inspect whatever outcomes were written
before the failure.
"""
from typing import Any, Optional, Sequence


class MulticallError(Exception):
    """Base exception for multicall batching"""

    def __init__(
        self,
        message: str,
        calls: Optional[Sequence[Any]] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message)
        self.message = message
        self.calls = list(calls) if calls is not None else []
        self.details = details or {}

    @property
    def cause(self) -> BaseException | None:
        """Underlying error this one wraps, if any"""
        return self.__cause__

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class EncodeError(MulticallError):
    """Packing the inputs of one call failed"""

    def __init__(self, index: int, reason: Any, calls: Optional[Sequence[Any]] = None):
        super().__init__(
            f"failed to pack call inputs at index [{index}]: {reason}",
            calls=calls,
            details={"index": index}
        )
        self.index = index


class DecodeError(MulticallError):
    """Unpacking the return data of one call failed"""

    def __init__(self, index: int, reason: Any, calls: Optional[Sequence[Any]] = None):
        super().__init__(
            f"failed to unpack call outputs at index [{index}]: {reason}",
            calls=calls,
            details={"index": index}
        )
        self.index = index


class AggregationError(MulticallError):
    """The aggregate invocation itself failed (transport error or revert)"""

    def __init__(self, reason: Any, calls: Optional[Sequence[Any]] = None):
        super().__init__(f"multicall failed: {reason}", calls=calls)


class ChunkError(MulticallError):
    """One chunk of a chunked operation failed"""

    def __init__(self, chunk_index: int, reason: Any, calls: Optional[Sequence[Any]] = None):
        super().__init__(
            f"call chunk [{chunk_index}] failed: {reason}",
            calls=calls,
            details={"chunk_index": chunk_index}
        )
        self.chunk_index = chunk_index


class DialError(MulticallError):
    """An RPC endpoint could not be dialed"""
