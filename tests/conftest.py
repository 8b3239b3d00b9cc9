"""
Shared fixtures: an in-memory Multicall3 contract and a small token ABI.
Nothing here touches a real chain.
"""
from types import SimpleNamespace
from typing import Callable

import pytest
from eth_abi import encode, decode
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3, HTTPProvider
from web3.exceptions import ContractLogicError

from multicall_batcher import Caller, Contract


TOKEN_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

HOLDERS = [
    "0x1111111111111111111111111111111111111111",
    "0x2222222222222222222222222222222222222222",
    "0x3333333333333333333333333333333333333333",
    "0x4444444444444444444444444444444444444444",
    "0x5555555555555555555555555555555555555555",
]
BALANCES = {Web3.to_checksum_address(h): (i + 1) * 10**18 for i, h in enumerate(HOLDERS)}

TOKEN_ABI = [
    {
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "getReserves",
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "explode",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "garbled",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
]

BALANCE_OF = function_signature_to_4byte_selector("balanceOf(address)")
DECIMALS = function_signature_to_4byte_selector("decimals()")
GET_RESERVES = function_signature_to_4byte_selector("getReserves()")
GARBLED = function_signature_to_4byte_selector("garbled()")

RESERVES = (5_000 * 10**18, 12_000_000 * 10**6, 1_700_000_000)

# "execution reverted: boom" as Error(string) revert data
REVERT_DATA = bytes.fromhex("08c379a0") + encode(["string"], ["boom"])


def token_responder(target: str, call_data: bytes) -> tuple[bool, bytes]:
    """Answers token calls the way a deployed contract would"""
    selector, args = call_data[:4], call_data[4:]
    if selector == BALANCE_OF:
        (owner,) = decode(["address"], args)
        return True, encode(["uint256"], [BALANCES.get(Web3.to_checksum_address(owner), 0)])
    if selector == DECIMALS:
        return True, encode(["uint8"], [6])
    if selector == GET_RESERVES:
        return True, encode(["uint112", "uint112", "uint32"], list(RESERVES))
    if selector == GARBLED:
        return True, b"\x00\x01\x02"
    # explode() and anything unknown revert
    return False, REVERT_DATA


class _Invocation:
    def __init__(self, fake: "FakeMulticall", method: str, args: tuple):
        self.fake = fake
        self.method = method
        self.args = args

    def call(self, transaction=None, block_identifier=None):
        fake = self.fake
        index = len(fake.invocations)
        fake.invocations.append(SimpleNamespace(
            method=self.method,
            args=self.args,
            transaction=transaction,
            block_identifier=block_identifier,
        ))

        if index in fake.fail_invocations:
            raise ConnectionError("connection reset by peer")

        if self.method == "aggregate3":
            (structs,) = self.args
            results = []
            for target, allow_failure, call_data in structs:
                success, return_data = fake.responder(target, call_data)
                if not success and not allow_failure:
                    raise ContractLogicError("execution reverted: Multicall3: call failed")
                results.append((success, return_data))
            return results

        require_success, structs = self.args
        results = []
        for target, call_data in structs:
            success, return_data = fake.responder(target, call_data)
            if not success and require_success:
                raise ContractLogicError("execution reverted: Multicall3: call failed")
            results.append((success, return_data))
        return results


class FakeMulticall:
    """In-memory Multicall3 with the deployed contract's revert semantics"""

    def __init__(self, responder: Callable[[str, bytes], tuple[bool, bytes]] = token_responder):
        self.responder = responder
        self.address = Web3.to_checksum_address("0xcA11bde05977b3631167028862bE2a173976CA11")
        self.invocations: list[SimpleNamespace] = []
        # Invocation numbers (0-based) that fail at the transport level
        self.fail_invocations: set[int] = set()
        self.functions = SimpleNamespace(
            aggregate3=lambda calls: _Invocation(self, "aggregate3", (calls,)),
            tryAggregate=lambda require_success, calls: _Invocation(
                self, "tryAggregate", (require_success, calls)
            ),
        )


@pytest.fixture
def token():
    return Contract(TOKEN_ABI, TOKEN_ADDRESS)


@pytest.fixture
def fake_multicall():
    return FakeMulticall()


@pytest.fixture
def web3():
    # Provider is never contacted; contract binding needs no network
    return Web3(HTTPProvider("http://127.0.0.1:8545"))


@pytest.fixture
def caller(web3, fake_multicall):
    caller = Caller(web3)
    caller.contract = fake_multicall
    return caller


@pytest.fixture
def balance_calls(token):
    return [token.new_call("balanceOf", holder) for holder in HOLDERS]
