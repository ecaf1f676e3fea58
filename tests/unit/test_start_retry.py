"""Tests for the start-retry policy and orchestrator."""

import asyncio

import pytest

from devnet.exceptions import ShutdownRequested, StartupExhausted
from devnet.start_retry import (
    AttemptOutcome,
    RetryAttempt,
    StartDecision,
    StartRetryOrchestrator,
    StartRetryPolicy,
)
from tests.helpers.devnet_fakes import FakeSupervisor, RecordingSleep, make_probe

POLICY = StartRetryPolicy(max_attempts=3, grace_delay=5, rpc_grace_delay=3, extended_grace_delay=5, backoff_delay=5)
COMMAND = ["celestia", "bridge", "start"]


def _attempt(index: int, outcome: AttemptOutcome) -> RetryAttempt:
    return RetryAttempt(index=index, outcome=outcome, elapsed_seconds=1.0)


class TestStartRetryPolicy:
    def test_no_history_means_try(self):
        assert POLICY.decide([]) is StartDecision.RETRY

    def test_success_wins(self):
        history = [_attempt(1, AttemptOutcome.PROCESS_EXITED), _attempt(2, AttemptOutcome.SUCCESS)]
        assert POLICY.decide(history) is StartDecision.SUCCEED

    def test_failures_under_budget_retry(self):
        history = [_attempt(1, AttemptOutcome.UNRESPONSIVE), _attempt(2, AttemptOutcome.PROCESS_EXITED)]
        assert POLICY.decide(history) is StartDecision.RETRY

    def test_budget_exhausted(self):
        history = [_attempt(i, AttemptOutcome.UNRESPONSIVE) for i in range(1, 4)]
        assert POLICY.decide(history) is StartDecision.EXHAUST

    def test_backoff_only_after_exit(self):
        assert POLICY.backoff_after(_attempt(1, AttemptOutcome.PROCESS_EXITED)) == 5
        assert POLICY.backoff_after(_attempt(1, AttemptOutcome.UNRESPONSIVE)) == 0

    def test_describe_includes_exit_code(self):
        attempt = RetryAttempt(index=2, outcome=AttemptOutcome.PROCESS_EXITED, elapsed_seconds=5.25, exit_code=1)
        assert attempt.describe() == "attempt 2: process_exited after 5.2s (exit code 1)"


@pytest.mark.asyncio
async def test_first_attempt_ready(fake_sleep):
    supervisor = FakeSupervisor()
    probe = make_probe([True])

    result = await StartRetryOrchestrator(supervisor, POLICY, sleep=fake_sleep).start("bridge", COMMAND, probe)

    assert result.process is supervisor.launched[0]
    assert [a.outcome for a in result.attempts] == [AttemptOutcome.SUCCESS]
    assert fake_sleep.calls == [5, 3]
    assert probe.calls == [True]


@pytest.mark.asyncio
async def test_extended_grace_recheck_succeeds(fake_sleep):
    supervisor = FakeSupervisor()
    probe = make_probe([False, True])

    result = await StartRetryOrchestrator(supervisor, POLICY, sleep=fake_sleep).start("bridge", COMMAND, probe)

    assert len(supervisor.launched) == 1
    assert result.attempts[0].outcome is AttemptOutcome.SUCCESS
    assert fake_sleep.calls == [5, 3, 5]
    assert supervisor.terminated == []


@pytest.mark.asyncio
async def test_exited_process_retried_after_backoff(fake_sleep):
    supervisor = FakeSupervisor(alive_plan=[1, True])
    probe = make_probe([True])

    result = await StartRetryOrchestrator(supervisor, POLICY, sleep=fake_sleep).start("bridge", COMMAND, probe)

    assert len(supervisor.launched) == 2
    assert result.process is supervisor.launched[1]
    first, second = result.attempts
    assert first.outcome is AttemptOutcome.PROCESS_EXITED
    assert first.exit_code == 1
    assert second.outcome is AttemptOutcome.SUCCESS
    # grace, backoff, grace, rpc grace
    assert fake_sleep.calls == [5, 5, 5, 3]
    assert probe.calls == [True]


@pytest.mark.asyncio
async def test_alive_but_unresponsive_exhausts(fake_sleep):
    supervisor = FakeSupervisor()
    probe = make_probe([False])

    with pytest.raises(StartupExhausted) as exc_info:
        await StartRetryOrchestrator(supervisor, POLICY, sleep=fake_sleep).start("bridge", COMMAND, probe)

    attempts = exc_info.value.attempts
    assert [a.outcome for a in attempts] == [AttemptOutcome.UNRESPONSIVE] * 3
    assert [a.index for a in attempts] == [1, 2, 3]
    assert len(supervisor.launched) == 3
    assert supervisor.terminated == supervisor.launched
    assert len(probe.calls) == 6


@pytest.mark.asyncio
async def test_every_launch_exits(fake_sleep):
    supervisor = FakeSupervisor(alive_plan=[2, 2, 2])
    probe = make_probe([True])

    with pytest.raises(StartupExhausted) as exc_info:
        await StartRetryOrchestrator(supervisor, POLICY, sleep=fake_sleep).start("bridge", COMMAND, probe)

    assert [a.exit_code for a in exc_info.value.attempts] == [2, 2, 2]
    assert probe.calls == []
    # no backoff after the final failed attempt
    assert fake_sleep.calls == [5, 5, 5, 5, 5]


@pytest.mark.asyncio
async def test_stop_before_first_launch_launches_nothing(fake_sleep):
    supervisor = FakeSupervisor()
    stop = asyncio.Event()
    stop.set()
    orchestrator = StartRetryOrchestrator(supervisor, POLICY, sleep=fake_sleep, stop_event=stop)

    with pytest.raises(ShutdownRequested) as exc_info:
        await orchestrator.start("bridge", COMMAND, make_probe([True]))

    assert exc_info.value.process is None
    assert supervisor.launched == []


@pytest.mark.asyncio
async def test_stop_during_grace_delay_hands_back_running_child():
    supervisor = FakeSupervisor()
    stop = asyncio.Event()

    class StopOnFirstDelay(RecordingSleep):
        async def __call__(self, delay: float) -> None:
            await super().__call__(delay)
            stop.set()

    sleep = StopOnFirstDelay()
    probe = make_probe([True])
    orchestrator = StartRetryOrchestrator(supervisor, POLICY, sleep=sleep, stop_event=stop)

    with pytest.raises(ShutdownRequested) as exc_info:
        await orchestrator.start("bridge", COMMAND, probe)

    assert exc_info.value.process is supervisor.launched[0]
    assert len(supervisor.launched) == 1
    assert sleep.calls == [5]
    assert probe.calls == []
