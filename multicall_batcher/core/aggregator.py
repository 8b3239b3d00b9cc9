"""
Multicall3 aggregation
Packs call records into one aggregate3 / tryAggregate request, executes it
and writes the per-call outcomes back onto the same records.

Request entry i and response entry i always refer to the same call; entries
are never reordered, dropped or deduplicated.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from multicall_batcher.core.exceptions import AggregationError, DecodeError, EncodeError
from multicall_batcher.core.network.call import BaseCall
from multicall_batcher.utils.logger import get_logger

logger = get_logger(__name__)

BlockIdentifier = Union[int, str, bytes]


@dataclass
class CallOptions:
    """Read context for an aggregate call (block to read at, sender)"""
    block_identifier: Optional[BlockIdentifier] = None
    sender: Optional[str] = None
    gas: Optional[int] = None

    def to_call_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for web3's ContractFunction.call()"""
        transaction: dict[str, Any] = {}
        if self.sender is not None:
            transaction["from"] = self.sender
        if self.gas is not None:
            transaction["gas"] = self.gas

        kwargs: dict[str, Any] = {}
        if transaction:
            kwargs["transaction"] = transaction
        if self.block_identifier is not None:
            kwargs["block_identifier"] = self.block_identifier
        return kwargs


def _call_kwargs(opts: Optional[CallOptions]) -> dict[str, Any]:
    return opts.to_call_kwargs() if opts is not None else {}


def _pack_all(calls: Sequence[BaseCall]) -> list[bytes]:
    packed = []
    for i, call in enumerate(calls):
        try:
            packed.append(call.pack())
        except Exception as e:
            raise EncodeError(i, e, calls=calls) from e
    return packed


def _apply_results(calls: Sequence[BaseCall], results: Sequence[Any]) -> list[BaseCall]:
    if len(results) != len(calls):
        raise AggregationError(
            f"expected {len(calls)} results, got {len(results)}", calls=calls
        )

    for i, (success, return_data) in enumerate(results):
        call = calls[i]  # index always matches
        call.failed = not success
        try:
            call.unpack(bytes(return_data))
        except Exception as e:
            raise DecodeError(i, e, calls=calls) from e

    failed = sum(1 for call in calls if call.failed)
    logger.debug(f"Multicall returned {len(calls)} results ({failed} failed)")
    return list(calls)


def aggregate3(
    contract: Any,
    calls: Sequence[BaseCall],
    opts: Optional[CallOptions] = None
) -> list[BaseCall]:
    """
    Execute calls through Multicall3.aggregate3

    Each call carries its own allow_failure flag. A reverting call that does
    not allow failure reverts the whole aggregate, which surfaces here as an
    AggregationError with no record touched.

    Returns:
        The same call records, with failed and decoded outputs set
    """
    if not calls:
        return []

    packed = _pack_all(calls)
    call_structs = [
        (call.target, call.allow_failure, call_data)
        for call, call_data in zip(calls, packed)
    ]

    logger.debug(f"aggregate3 with {len(call_structs)} calls")
    try:
        results = contract.functions.aggregate3(call_structs).call(**_call_kwargs(opts))
    except Exception as e:
        raise AggregationError(e, calls=calls) from e

    return _apply_results(calls, results)


def try_aggregate(
    contract: Any,
    require_success: bool,
    calls: Sequence[BaseCall],
    opts: Optional[CallOptions] = None
) -> list[BaseCall]:
    """
    Execute calls through Multicall3.tryAggregate

    One require_success flag covers the whole batch. When it is False a
    reverting call is recorded as failed and the batch still succeeds; when
    it is True any revert fails the whole batch with an AggregationError.
    Per-call allow_failure flags are ignored in this mode.

    Returns:
        The same call records, with failed and decoded outputs set
    """
    if not calls:
        return []

    packed = _pack_all(calls)
    call_structs = [
        (call.target, call_data)
        for call, call_data in zip(calls, packed)
    ]

    logger.debug(f"tryAggregate with {len(call_structs)} calls (require_success={require_success})")
    try:
        results = contract.functions.tryAggregate(
            require_success, call_structs
        ).call(**_call_kwargs(opts))
    except Exception as e:
        raise AggregationError(e, calls=calls) from e

    return _apply_results(calls, results)
