"""
Multicall Batcher
=================
Batches many read-only contract calls into a few Multicall3 round-trips

Usage:
    caller = Caller.dial("https://eth.llamarpc.com")
    token = Contract(ERC20_ABI, "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48")
    calls = [token.new_call("balanceOf", holder) for holder in holders]
    caller.call_chunked(*calls, chunk_size=50, cooldown=0.2)
    balances = [call.result for call in calls]
"""
from multicall_batcher.core.aggregator import CallOptions
from multicall_batcher.core.chunking import chunk_inputs
from multicall_batcher.core.exceptions import (
    MulticallError,
    EncodeError,
    DecodeError,
    AggregationError,
    ChunkError,
    DialError,
)
from multicall_batcher.core.network.call import BaseCall, Call, Contract, RawCall
from multicall_batcher.core.network.multicall import Caller, DEFAULT_ADDRESS, MULTICALL3_ABI
from multicall_batcher.utils.logger import setup_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    "Caller",
    "CallOptions",
    "BaseCall",
    "Call",
    "Contract",
    "RawCall",
    "chunk_inputs",
    "MulticallError",
    "EncodeError",
    "DecodeError",
    "AggregationError",
    "ChunkError",
    "DialError",
    "DEFAULT_ADDRESS",
    "MULTICALL3_ABI",
    "setup_logging",
    "get_logger",
]
