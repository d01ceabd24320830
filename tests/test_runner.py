"""
Unit Tests for the entry-point runner
"""

import pytest
from web3 import Web3

from deployment.inputs import InteractiveInputs
from deployment.pipeline import OutcomeStatus
from deployment.runner import INTERACTIVE, SCRIPTED, DeploymentRunner, main

from conftest import TEST_ADDRESS, TEST_PRIVATE_KEY, FakeChain, make_rpc_manager


def fake_networks(hub_balance=0, local_balance=Web3.to_wei(1, 'ether')):
    return {
        "polkadot-hub": FakeChain(balances={TEST_ADDRESS: hub_balance}),
        "local": FakeChain(balances={TEST_ADDRESS: local_balance}),
    }


def answers(*values):
    queue = list(values)
    return InteractiveInputs(prompt=lambda question: queue.pop(0))


class TestScriptedMode:
    """PRIVATE_KEY + DEPLOY_NETWORK, no prompts"""

    @pytest.mark.asyncio
    async def test_missing_private_key(self, settings):
        chains = fake_networks()
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(chains))

        assert await runner.run_scripted() == 1
        assert runner.outcome is None
        assert chains["local"].calls == []

    @pytest.mark.asyncio
    async def test_invalid_private_key(self, settings):
        settings.private_key = "0x1234"
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(fake_networks()))

        assert await runner.run_scripted() == 1

    @pytest.mark.asyncio
    async def test_success(self, settings):
        settings.private_key = TEST_PRIVATE_KEY
        chains = fake_networks()
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(chains))

        assert await runner.run(SCRIPTED) == 0
        assert runner.outcome.succeeded
        assert chains["local"].provider.disconnected
        # Only the configured network is contacted
        assert chains["polkadot-hub"].calls == []

    @pytest.mark.asyncio
    async def test_blank_network_uses_default(self, settings):
        settings.private_key = TEST_PRIVATE_KEY
        settings.network = ""
        chains = fake_networks(hub_balance=0)
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(chains))

        assert await runner.run_scripted() == 1
        assert runner.outcome.status is OutcomeStatus.NO_ELIGIBLE_NETWORK
        assert [s.network.key for s in runner.outcome.surveyed] == ["polkadot-hub"]
        # The funded local node is never surveyed
        assert chains["local"].calls == []

    @pytest.mark.asyncio
    async def test_unfunded_fails(self, settings):
        settings.private_key = TEST_PRIVATE_KEY
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(fake_networks(local_balance=0)))

        assert await runner.run_scripted() == 1
        assert runner.outcome.status is OutcomeStatus.NO_ELIGIBLE_NETWORK

    @pytest.mark.asyncio
    async def test_unknown_mode(self, settings):
        with pytest.raises(ValueError):
            await DeploymentRunner(settings).run("batch")


class TestInteractiveMode:
    """Prompts for key, value and confirmation"""

    @pytest.mark.asyncio
    async def test_prompted_deployment(self, settings):
        chains = fake_networks()
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(chains))

        code = await runner.run_interactive(answers(TEST_PRIVATE_KEY, "1", "false", "y"))

        assert code == 0
        assert runner.outcome.verification.initial_value is False
        assert runner.outcome.verification.final_value is True

    @pytest.mark.asyncio
    async def test_continue_with_zero_balance(self, settings):
        chains = fake_networks(local_balance=0)
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(chains))

        code = await runner.run_interactive(answers(TEST_PRIVATE_KEY, "y", "1", "", "y"))

        assert code == 0
        assert runner.outcome.succeeded

    @pytest.mark.asyncio
    async def test_rejects_key_without_prefix(self, settings):
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(fake_networks()))

        assert await runner.run_interactive(answers(TEST_PRIVATE_KEY[2:])) == 1

    @pytest.mark.asyncio
    async def test_cancel_is_not_an_error(self, settings):
        settings.private_key = TEST_PRIVATE_KEY
        chains = fake_networks()
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(chains))

        code = await runner.run_interactive(answers("1", "", "n"))

        assert code == 0
        assert runner.outcome.status is OutcomeStatus.CANCELLED
        assert 'eth_sendRawTransaction' not in chains["local"].calls


class TestDebugMode:
    """Surveys every network"""

    @pytest.mark.asyncio
    async def test_without_key_only_surveys(self, settings):
        chains = fake_networks()
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(chains))

        code = await runner.run_debug(answers(""))

        assert code == 1
        assert runner.outcome.status is OutcomeStatus.NO_ELIGIBLE_NETWORK
        for chain in chains.values():
            assert chain.calls[0] == 'eth_blockNumber'
            assert 'eth_getBalance' not in chain.calls

    @pytest.mark.asyncio
    async def test_picks_funded_network(self, settings):
        chains = fake_networks(hub_balance=0)
        runner = DeploymentRunner(settings, rpc_manager=make_rpc_manager(chains))

        code = await runner.run_debug(answers(TEST_PRIVATE_KEY, "1", "", "y"))

        assert code == 0
        assert runner.outcome.network.key == "local"
        assert 'eth_sendRawTransaction' not in chains["polkadot-hub"].calls


class TestMain:
    """Process entry point"""

    def test_bad_configuration(self, monkeypatch):
        monkeypatch.setenv("INITIAL_VALUE", "perhaps")
        monkeypatch.setenv("LOG_FILE", "")

        assert main(SCRIPTED) == 1

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("PRIVATE_KEY", raising=False)
        monkeypatch.delenv("INITIAL_VALUE", raising=False)
        monkeypatch.setenv("LOG_FILE", "")

        assert main(SCRIPTED) == 1

    def test_closed_stdin(self, monkeypatch):
        def closed(question):
            raise EOFError

        monkeypatch.delenv("PRIVATE_KEY", raising=False)
        monkeypatch.delenv("INITIAL_VALUE", raising=False)
        monkeypatch.setenv("LOG_FILE", "")
        monkeypatch.setattr("builtins.input", closed)

        assert main(INTERACTIVE) == 1
