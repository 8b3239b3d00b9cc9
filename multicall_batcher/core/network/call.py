"""
Call records for Multicall batching

A call record is one logical read of one contract function. The batching
engine only relies on the BaseCall interface: a target address, a failure
tolerance flag, pack() to build call data and unpack() to decode return
data back onto the record. Records are mutated in place, so the list the
caller built is the list holding the results afterwards.
"""
import json
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from eth_abi import encode, decode
from eth_utils import to_bytes
from eth_utils.abi import collapse_if_tuple, function_abi_to_4byte_selector
from web3 import Web3


def _checksum(address: str) -> str:
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValueError(f"invalid address: {address!r}")
    return Web3.to_checksum_address(address)


class BaseCall(ABC):
    """Abstract base class for call records"""

    def __init__(self, target: str, allow_failure: bool = False):
        self._target = _checksum(target)
        self.allow_failure = allow_failure
        # Outcome, written by the aggregator once the response arrives
        self.failed = False

    @property
    def target(self) -> str:
        """Checksummed address of the contract being called"""
        return self._target

    def allowing_failure(self, allow: bool = True) -> "BaseCall":
        """Let this call revert without reverting the whole aggregate3 batch"""
        self.allow_failure = allow
        return self

    @abstractmethod
    def pack(self) -> bytes:
        """
        Encode this call's data (selector and arguments)

        Returns:
            Raw call data sent to the target contract
        """
        pass

    @abstractmethod
    def unpack(self, data: bytes) -> None:
        """
        Decode raw return data into this call's output fields

        Must tolerate being called on a failed call; implementations leave
        the outputs cleared in that case so a reused record holds no stale value.
        """
        pass


class Contract:
    """A contract ABI bound to an address, used to build calls"""

    def __init__(self, abi: str | list[dict], address: str):
        if isinstance(abi, str):
            abi = json.loads(abi)
        self.abi: list[dict] = abi
        self.address = _checksum(address)

        self._functions: dict[str, list[dict]] = {}
        for entry in abi:
            if entry.get("type", "function") == "function" and "name" in entry:
                self._functions.setdefault(entry["name"], []).append(entry)

    def new_call(self, method: str, *args: Any) -> "Call":
        """Build a call to one of this contract's functions"""
        candidates = self._functions.get(method)
        if not candidates:
            raise ValueError(f"method '{method}' not found in contract ABI")

        # Overloads are told apart by arity only
        for entry in candidates:
            if len(entry.get("inputs", [])) == len(args):
                return Call(self, entry, args)

        raise ValueError(
            f"method '{method}' takes no overload with {len(args)} argument(s)"
        )

    def __repr__(self) -> str:
        return f"Contract({self.address})"


class Call(BaseCall):
    """
    ABI-driven call record

    After a successful batch, outputs holds the decoded return values in
    ABI order; it is None for calls that failed on-chain.
    """

    def __init__(self, contract: Contract, abi_entry: dict, args: Sequence[Any]):
        super().__init__(contract.address)
        self.contract = contract
        self.method: str = abi_entry["name"]
        self.label: Optional[str] = None
        self.outputs: Optional[tuple] = None

        self._args = tuple(args)
        self._selector = function_abi_to_4byte_selector(abi_entry)
        self._input_types = [collapse_if_tuple(p) for p in abi_entry.get("inputs", [])]
        self._output_types = [collapse_if_tuple(p) for p in abi_entry.get("outputs", [])]
        self._output_names = [p.get("name", "") for p in abi_entry.get("outputs", [])]

    @property
    def args(self) -> tuple:
        return self._args

    def named(self, label: str) -> "Call":
        """Attach a human readable label, handy when logging results"""
        self.label = label
        return self

    def pack(self) -> bytes:
        return self._selector + encode(self._input_types, list(self._args))

    def unpack(self, data: bytes) -> None:
        if self.failed:
            self.outputs = None
            return
        self.outputs = tuple(decode(self._output_types, data))

    @property
    def result(self) -> Any:
        """
        Decoded outputs in their most convenient shape

        A single output is unwrapped, fully named outputs become a dict,
        anything else stays a tuple. None when nothing was decoded.
        """
        if self.outputs is None:
            return None
        if len(self.outputs) == 1:
            return self.outputs[0]
        if self._output_names and all(self._output_names):
            return dict(zip(self._output_names, self.outputs))
        return self.outputs

    def __repr__(self) -> str:
        name = self.label or self.method
        return f"Call({name} @ {self.target}, failed={self.failed})"


class RawCall(BaseCall):
    """Call record for pre-encoded call data"""

    def __init__(
        self,
        target: str,
        call_data: bytes | str,
        output_types: list[str],
        allow_failure: bool = False
    ):
        super().__init__(target, allow_failure)
        if isinstance(call_data, str):
            call_data = to_bytes(hexstr=call_data)
        self._call_data = bytes(call_data)
        self.output_types = list(output_types)
        self.outputs: Optional[tuple] = None

    def pack(self) -> bytes:
        return self._call_data

    def unpack(self, data: bytes) -> None:
        if self.failed:
            self.outputs = None
            return
        self.outputs = tuple(decode(self.output_types, data))

    @property
    def result(self) -> Any:
        # Unwrap single values
        if self.outputs is not None and len(self.outputs) == 1:
            return self.outputs[0]
        return self.outputs

    def __repr__(self) -> str:
        return f"RawCall({self.target}, failed={self.failed})"
