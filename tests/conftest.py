"""
Shared fixtures: an in-memory chain that speaks the AsyncWeb3 surface the
deployment code uses
"""

import json

import aiohttp
import pytest
from web3 import Web3

from blockchain.artifacts import minimal_flipper_abi
from deployment.settings import DeploySettings
from deployment.wallet_manager import WalletManager
from utils.rpc_manager import RPCManager


# Well-known development key (hardhat / anvil account #1); holds nothing real
TEST_PRIVATE_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
TEST_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

# PolkaVM blobs start with "PVM\0"
FLIPPER_BYTECODE = b"PVM\x00" + bytes(range(32))

CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class FakeCall:
    """Constructor or function call on the fake chain."""

    def __init__(self, chain, kind, args=(), address=None):
        self.chain = chain
        self.kind = kind
        self.args = args
        self.address = address

    async def estimate_gas(self, transaction=None):
        self.chain.record('eth_estimateGas')
        if self.chain.estimate_error:
            raise self.chain.estimate_error
        return self.chain.estimated_gas

    async def build_transaction(self, transaction):
        built = dict(transaction)
        built['value'] = 0
        if self.kind == 'deploy':
            flag = '01' if self.args and self.args[0] else '00'
            built['data'] = '0x' + FLIPPER_BYTECODE.hex() + flag
        else:
            built['to'] = self.address
            built['data'] = '0xcde4efa9'
        self.chain.built.append((self.kind, self.args, self.address))
        return built

    async def call(self):
        self.chain.record('eth_call')
        if self.chain.call_error:
            raise self.chain.call_error
        return self.chain.storage[self.address]


class FakeFunctions:
    def __init__(self, chain, address):
        self.chain = chain
        self.address = address

    def get(self):
        return FakeCall(self.chain, 'get', address=self.address)

    def flip(self):
        return FakeCall(self.chain, 'flip', address=self.address)


class FakeContract:
    def __init__(self, chain, address):
        self.address = address
        self.functions = FakeFunctions(chain, address)


class FakeContractFactory:
    def __init__(self, chain):
        self.chain = chain

    def constructor(self, *args):
        return FakeCall(self.chain, 'deploy', args=args)


class FakeEth:
    def __init__(self, chain):
        self.chain = chain

    @property
    async def block_number(self):
        self.chain.record('eth_blockNumber')
        if self.chain.unreachable:
            raise aiohttp.ClientConnectionError(f"Cannot connect to host {self.chain.rpc_url}")
        return self.chain.height

    @property
    async def gas_price(self):
        self.chain.record('eth_gasPrice')
        return self.chain.gas_price_wei

    async def get_balance(self, address):
        self.chain.record('eth_getBalance')
        return self.chain.balances.get(address, 0)

    async def get_transaction_count(self, address, block_identifier='latest'):
        self.chain.record('eth_getTransactionCount')
        return self.chain.nonce

    def contract(self, address=None, abi=None, bytecode=None):
        if address is not None:
            return FakeContract(self.chain, address)
        return FakeContractFactory(self.chain)

    async def send_raw_transaction(self, raw_transaction):
        self.chain.record('eth_sendRawTransaction')
        if self.chain.send_error:
            raise self.chain.send_error

        tx_hash = Web3.keccak(raw_transaction)
        self.chain.pending[Web3.to_hex(tx_hash)] = self.chain.built.pop(0)
        self.chain.nonce += 1
        return tx_hash

    async def wait_for_transaction_receipt(self, transaction_hash, timeout=120):
        self.chain.record('eth_getTransactionReceipt')
        kind, args, address = self.chain.pending.pop(transaction_hash)
        return self.chain.mine(kind, args, address, transaction_hash)


class FakeProvider:
    def __init__(self):
        self.disconnected = False

    async def disconnect(self):
        self.disconnected = True


class FakeChain:
    """
    Minimal chain state: balances, one bool per contract, receipts

    Knobs (unreachable, revert_deploy, broken_flip, ...) switch on the
    failure modes the pipeline has to handle.
    """

    def __init__(self, rpc_url="http://fake", height=1234, balances=None):
        self.rpc_url = rpc_url
        self.height = height
        self.balances = dict(balances or {})
        self.gas_price_wei = Web3.to_wei(1, 'gwei')
        self.estimated_gas = 210_000
        self.nonce = 0

        self.unreachable = False
        self.revert_deploy = False
        self.revert_flip = False
        self.broken_flip = False
        self.estimate_error = None
        self.send_error = None
        self.call_error = None

        self.calls = []
        self.built = []
        self.pending = {}
        self.storage = {}

        self.eth = FakeEth(self)
        self.provider = FakeProvider()

    def record(self, method):
        self.calls.append(method)

    def mine(self, kind, args, address, tx_hash):
        receipt = {'transactionHash': tx_hash, 'status': 1, 'contractAddress': None}

        if kind == 'deploy':
            if self.revert_deploy:
                receipt['status'] = 0
            else:
                self.storage[CONTRACT_ADDRESS] = bool(args[0])
                receipt['contractAddress'] = CONTRACT_ADDRESS
        elif kind == 'flip':
            if self.revert_flip:
                receipt['status'] = 0
            elif not self.broken_flip:
                self.storage[address] = not self.storage[address]

        return receipt


@pytest.fixture
def chain():
    """Reachable chain where the test account holds 1 token"""
    return FakeChain(balances={TEST_ADDRESS: Web3.to_wei(1, 'ether')})


@pytest.fixture
def wallet():
    return WalletManager(TEST_PRIVATE_KEY)


@pytest.fixture
def artifact_dir(tmp_path):
    """Build output with a Solidity ABI file and PolkaVM bytecode"""
    directory = tmp_path / "target" / "ink"
    directory.mkdir(parents=True)
    (directory / "flipper.polkavm").write_bytes(FLIPPER_BYTECODE)
    (directory / "flipper.abi").write_text(json.dumps(minimal_flipper_abi()))
    return directory


@pytest.fixture
def settings(tmp_path, artifact_dir):
    return DeploySettings(
        network="local",
        artifact_dir=str(artifact_dir),
        record_path=str(tmp_path / "deployment.json"),
        receipt_timeout=5,
        log_file=None
    )


def make_rpc_manager(chains):
    """RPCManager that hands out fake chains by network key"""
    return RPCManager(web3_factory=lambda profile: chains[profile.key])


@pytest.fixture(autouse=True)
def no_rpc_overrides(monkeypatch):
    monkeypatch.delenv("POLKADOT_HUB_RPC_URL", raising=False)
    monkeypatch.delenv("LOCAL_RPC_URL", raising=False)
