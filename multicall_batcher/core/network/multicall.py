"""
Multicall3 Implementation
Allows batching multiple smart contract read calls into a single RPC request.
Contract Address (All Chains): 0xcA11bde05977b3631167028862bE2a173976CA11
"""
from datetime import timedelta
from functools import partial
from typing import Optional

from web3 import Web3

from multicall_batcher.config.settings import (
    MULTICALL3_ADDRESS,
    MULTICALL_ADDRESS,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_COOLDOWN_SECONDS,
)
from multicall_batcher.core import aggregator
from multicall_batcher.core.aggregator import CallOptions
from multicall_batcher.core.batch_driver import run_chunked
from multicall_batcher.core.exceptions import MulticallError
from multicall_batcher.core.network.call import BaseCall
from multicall_batcher.utils.logger import get_logger
from multicall_batcher.utils.rpc import dial

logger = get_logger(__name__)

# Same on all chains, see https://github.com/mds1/multicall
DEFAULT_ADDRESS = MULTICALL3_ADDRESS

MULTICALL3_ABI = [
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "target", "type": "address"},
                    {"internalType": "bool", "name": "allowFailure", "type": "bool"},
                    {"internalType": "bytes", "name": "callData", "type": "bytes"}
                ],
                "internalType": "struct Multicall3.Call3[]",
                "name": "calls",
                "type": "tuple[]"
            }
        ],
        "name": "aggregate3",
        "outputs": [
            {
                "components": [
                    {"internalType": "bool", "name": "success", "type": "bool"},
                    {"internalType": "bytes", "name": "returnData", "type": "bytes"}
                ],
                "internalType": "struct Multicall3.Result[]",
                "name": "returnData",
                "type": "tuple[]"
            }
        ],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "bool", "name": "requireSuccess", "type": "bool"},
            {
                "components": [
                    {"internalType": "address", "name": "target", "type": "address"},
                    {"internalType": "bytes", "name": "callData", "type": "bytes"}
                ],
                "internalType": "struct Multicall3.Call[]",
                "name": "calls",
                "type": "tuple[]"
            }
        ],
        "name": "tryAggregate",
        "outputs": [
            {
                "components": [
                    {"internalType": "bool", "name": "success", "type": "bool"},
                    {"internalType": "bytes", "name": "returnData", "type": "bytes"}
                ],
                "internalType": "struct Multicall3.Result[]",
                "name": "returnData",
                "type": "tuple[]"
            }
        ],
        "stateMutability": "payable",
        "type": "function"
    }
]


class Caller:
    """
    Makes multicalls through a Multicall3 contract

    Every operation mutates the given call records in place and returns
    those same objects in input order, so iterating the caller's own list
    after the call shows the outcomes.
    """

    def __init__(self, web3: Web3, multicall_address: Optional[str] = None):
        address = MULTICALL_ADDRESS if multicall_address is None else multicall_address
        if not Web3.is_address(address):
            raise MulticallError(f"invalid multicall address: {address!r}")

        self.web3 = web3
        self.contract = web3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=MULTICALL3_ABI
        )

    @classmethod
    def dial(cls, url: str, multicall_address: Optional[str] = None) -> "Caller":
        """Dial an Ethereum JSON-RPC endpoint and use it as the caller backend"""
        return cls(dial(url), multicall_address)

    @property
    def address(self) -> str:
        return self.contract.address

    def call(
        self,
        *calls: BaseCall,
        opts: Optional[CallOptions] = None
    ) -> list[BaseCall]:
        """Make one aggregate3 multicall, honouring each call's allow_failure"""
        return aggregator.aggregate3(self.contract, calls, opts)

    def try_call(
        self,
        *calls: BaseCall,
        require_success: bool = False,
        opts: Optional[CallOptions] = None
    ) -> list[BaseCall]:
        """Make one tryAggregate multicall with a shared require_success flag"""
        return aggregator.try_aggregate(self.contract, require_success, calls, opts)

    def call_chunked(
        self,
        *calls: BaseCall,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        cooldown: float | timedelta = DEFAULT_COOLDOWN_SECONDS,
        opts: Optional[CallOptions] = None
    ) -> list[BaseCall]:
        """
        Make multiple aggregate3 multicalls by chunking the given calls.
        Cooldown is helpful for sleeping between chunks and avoiding rate limits.
        """
        run = partial(aggregator.aggregate3, self.contract, opts=opts)
        return run_chunked(run, chunk_size, cooldown, calls)

    def try_call_chunked(
        self,
        *calls: BaseCall,
        require_success: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        cooldown: float | timedelta = DEFAULT_COOLDOWN_SECONDS,
        opts: Optional[CallOptions] = None
    ) -> list[BaseCall]:
        """
        Make multiple tryAggregate multicalls by chunking the given calls.
        Cooldown is helpful for sleeping between chunks and avoiding rate limits.
        """
        run = partial(aggregator.try_aggregate, self.contract, require_success, opts=opts)
        return run_chunked(run, chunk_size, cooldown, calls)
