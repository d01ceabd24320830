"""
Unit Tests for the contract handle and post-deploy verification
"""

import asyncio

import pytest
from hypothesis import given, settings, strategies as st

from blockchain.artifacts import minimal_flipper_abi
from blockchain.contract_manager import FlipperContract
from blockchain.nonce_manager import NonceManager
from blockchain.transaction_builder import TransactionBuilder
from deployment.verifier import verify_toggle
from deployment.wallet_manager import WalletManager
from utils.exceptions import TransactionRevertedError, VerificationFailedError

from conftest import CONTRACT_ADDRESS, TEST_ADDRESS, TEST_PRIVATE_KEY, FakeChain


def deployed_flipper(chain, wallet, value=True):
    """Flipper already on the fake chain holding `value`"""
    chain.storage[CONTRACT_ADDRESS] = value
    tx_builder = TransactionBuilder(chain, wallet, NonceManager(chain, wallet.address), chain_id=1337)
    return FlipperContract(chain, CONTRACT_ADDRESS, minimal_flipper_abi(), tx_builder, receipt_timeout=5)


class TestFlipperContract:
    """Test get() and flip()"""

    @pytest.mark.asyncio
    async def test_get(self, chain, wallet):
        contract = deployed_flipper(chain, wallet, False)

        assert await contract.get() is False

    @pytest.mark.asyncio
    async def test_flip_inverts(self, chain, wallet):
        contract = deployed_flipper(chain, wallet, True)

        tx_hash = await contract.flip()

        assert tx_hash.startswith("0x")
        assert chain.storage[CONTRACT_ADDRESS] is False

    @pytest.mark.asyncio
    async def test_reverted_flip(self, chain, wallet):
        chain.revert_flip = True
        contract = deployed_flipper(chain, wallet)

        with pytest.raises(TransactionRevertedError, match="flip"):
            await contract.flip()


class TestVerifyToggle:
    """Test the read / flip / read smoke test"""

    @pytest.mark.asyncio
    async def test_success(self, chain, wallet):
        contract = deployed_flipper(chain, wallet, True)

        result = await verify_toggle(contract, expected_initial=True)

        assert result.initial_value is True
        assert result.final_value is False
        assert result.changed
        assert chain.calls.count('eth_call') == 2

    @pytest.mark.asyncio
    async def test_flip_without_effect(self, chain, wallet):
        chain.broken_flip = True
        contract = deployed_flipper(chain, wallet, True)

        with pytest.raises(VerificationFailedError) as exc_info:
            await verify_toggle(contract, expected_initial=True)

        assert "still returns True" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_wrong_initial_value(self, chain, wallet):
        contract = deployed_flipper(chain, wallet, False)

        with pytest.raises(VerificationFailedError, match="expected True"):
            await verify_toggle(contract, expected_initial=True)

        # Nothing was sent
        assert 'eth_sendRawTransaction' not in chain.calls

    @pytest.mark.asyncio
    async def test_no_expectation(self, chain, wallet):
        contract = deployed_flipper(chain, wallet, False)

        result = await verify_toggle(contract)

        assert (result.initial_value, result.final_value) == (False, True)

    @pytest.mark.asyncio
    async def test_read_failure_propagates(self, chain, wallet):
        chain.call_error = ValueError("execution reverted: contract trapped")
        contract = deployed_flipper(chain, wallet)

        with pytest.raises(ValueError):
            await verify_toggle(contract)


class TestToggleProperty:
    """flip() is its own inverse"""

    @settings(max_examples=25, deadline=None)
    @given(initial=st.booleans(), flips=st.integers(min_value=0, max_value=6))
    def test_parity(self, initial, flips):
        chain = FakeChain(balances={TEST_ADDRESS: 10**18})
        contract = deployed_flipper(chain, WalletManager(TEST_PRIVATE_KEY), initial)

        async def run():
            for _ in range(flips):
                await contract.flip()
            return await contract.get()

        assert asyncio.run(run()) == (initial if flips % 2 == 0 else not initial)
        assert chain.nonce == flips
