"""Tests for the process supervisor using real child processes."""

import sys

import pytest

from devnet.exceptions import CommandFailedError
from devnet.process_supervisor import ProcessSupervisor

SLEEPER = [sys.executable, "-c", "import time; time.sleep(30)"]


@pytest.mark.asyncio
async def test_launch_is_alive_and_terminate():
    supervisor = ProcessSupervisor(graceful_timeout=5, force_timeout=5)
    process = await supervisor.launch("sleeper", SLEEPER)

    assert supervisor.is_alive(process)
    assert supervisor.processes == [process]

    exit_code = await supervisor.terminate(process)

    assert exit_code != 0
    assert not supervisor.is_alive(process)
    assert supervisor.processes == []


@pytest.mark.asyncio
async def test_wait_returns_exit_code():
    supervisor = ProcessSupervisor()
    process = await supervisor.launch("quitter", [sys.executable, "-c", "import sys; sys.exit(3)"])

    assert await supervisor.wait(process) == 3
    assert not supervisor.is_alive(process)


@pytest.mark.asyncio
async def test_terminate_all_stops_every_child():
    supervisor = ProcessSupervisor(graceful_timeout=5, force_timeout=5)
    first = await supervisor.launch("one", SLEEPER)
    second = await supervisor.launch("two", SLEEPER)

    await supervisor.terminate_all()

    assert first.returncode is not None
    assert second.returncode is not None
    assert supervisor.processes == []


@pytest.mark.asyncio
async def test_run_command_captures_stdout():
    result = await ProcessSupervisor().run_command([sys.executable, "-c", "print('celestia1abc')"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "celestia1abc"


@pytest.mark.asyncio
async def test_run_command_failure_raises():
    command = [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(4)"]

    with pytest.raises(CommandFailedError) as exc_info:
        await ProcessSupervisor().run_command(command, description="failing step")

    assert exc_info.value.exit_code == 4
    assert exc_info.value.output == "boom"
    assert "failing step" in str(exc_info.value)


@pytest.mark.asyncio
async def test_run_command_missing_binary():
    with pytest.raises(CommandFailedError):
        await ProcessSupervisor().run_command(["/nonexistent/celestia-appd", "version"])


@pytest.mark.asyncio
async def test_launch_missing_binary_raises_command_failed(tmp_path):
    supervisor = ProcessSupervisor()
    missing = str(tmp_path / "celestia-appd-missing")

    with pytest.raises(CommandFailedError) as exc_info:
        await supervisor.launch("validator", [missing, "start"])

    assert exc_info.value.command == [missing, "start"]
    assert exc_info.value.exit_code is None
    assert supervisor.processes == []
