"""Tests for the command batch executor."""

import asyncio

import pytest

from fleet_facts.errors import AggregateCommandError, SessionAllocationError
from fleet_facts.services.batch import CommandBatchExecutor
from fleet_facts.utils.deadline import Deadline
from tests.fakes import FakeConnection, Script


@pytest.fixture
def executor() -> CommandBatchExecutor:
    return CommandBatchExecutor()


class TestExecuteBatch:
    """Happy path and per-label failures."""

    @pytest.mark.asyncio
    async def test_output_is_trimmed(self, executor: CommandBatchExecutor) -> None:
        conn = FakeConnection({"echo hi": Script(stdout="  hi\n")})

        outcome = await executor.execute_batch(conn, {"a": "echo hi"}, "u@h")

        assert outcome.facts == {"a": "hi"}
        assert outcome.error is None

    @pytest.mark.asyncio
    async def test_one_of_three_fails(self, executor: CommandBatchExecutor) -> None:
        """Failures are reported per label next to the partial facts."""
        conn = FakeConnection(
            {
                "uname -rs": Script(stdout="Linux 5.10\n"),
                "cat /etc/os-release": Script(stderr="No such file\n", exit_status=1),
                "hostname": Script(stdout="web-1\n"),
            }
        )
        commands = {
            "kernel": "uname -rs",
            "release": "cat /etc/os-release",
            "host": "hostname",
        }

        outcome = await executor.execute_batch(conn, commands, "centos@10.0.0.1")

        assert outcome.facts == {"kernel": "Linux 5.10", "host": "web-1"}
        assert isinstance(outcome.error, AggregateCommandError)
        assert outcome.error.labels == ["release"]
        failure = outcome.error.failures[0]
        assert failure.exit_status == 1
        assert failure.stderr == "No such file"
        assert failure.reason == "exit status 1"
        assert "centos@10.0.0.1" in str(outcome.error)

    @pytest.mark.asyncio
    async def test_all_commands_start_before_any_wait(
        self, executor: CommandBatchExecutor
    ) -> None:
        """Commands run concurrently on the one connection."""
        conn = FakeConnection(
            {
                "sleep a": Script(stdout="a", delay=0.1),
                "sleep b": Script(stdout="b", delay=0.1),
                "sleep c": Script(stdout="c", delay=0.1),
            }
        )
        loop = asyncio.get_running_loop()

        start = loop.time()
        outcome = await executor.execute_batch(
            conn, {"a": "sleep a", "b": "sleep b", "c": "sleep c"}
        )
        elapsed = loop.time() - start

        assert outcome.facts == {"a": "a", "b": "b", "c": "c"}
        assert elapsed < 0.25, f"Expected concurrent commands (~0.1s), got {elapsed:.3f}s"

    @pytest.mark.asyncio
    async def test_completion_order_does_not_matter(
        self, executor: CommandBatchExecutor
    ) -> None:
        """Facts follow label order even when later labels finish first."""
        conn = FakeConnection(
            {
                "slow": Script(stdout="1", delay=0.05),
                "fast": Script(stdout="2"),
            }
        )

        outcome = await executor.execute_batch(conn, {"first": "slow", "second": "fast"})

        assert list(outcome.facts) == ["first", "second"]

    @pytest.mark.asyncio
    async def test_processes_are_opened_in_binary_mode(
        self, executor: CommandBatchExecutor
    ) -> None:
        conn = FakeConnection({"true": Script(stdout=b"ok\n")})

        await executor.execute_batch(conn, {"t": "true"})

        assert conn.process_options == [{"encoding": None}]

    @pytest.mark.asyncio
    async def test_binary_output_does_not_affect_siblings(
        self, executor: CommandBatchExecutor
    ) -> None:
        """Undecodable bytes are replaced and the other labels keep their facts."""
        conn = FakeConnection(
            {
                "binary": Script(stdout=b"\xff\xfe\xfa"),
                "alpha": Script(stdout=b"alpha\n"),
                "beta": Script(stdout=b"beta\n"),
            }
        )

        outcome = await executor.execute_batch(
            conn, {"bin": "binary", "a": "alpha", "b": "beta"}
        )

        assert outcome.error is None
        assert outcome.facts["a"] == "alpha"
        assert outcome.facts["b"] == "beta"
        assert outcome.facts["bin"] == "\ufffd\ufffd\ufffd"

    @pytest.mark.asyncio
    async def test_bytes_stderr_is_decoded_in_failure(
        self, executor: CommandBatchExecutor
    ) -> None:
        conn = FakeConnection(
            {"bad": Script(stderr=b"oops \xff\n", exit_status=3)}
        )

        outcome = await executor.execute_batch(conn, {"bad": "bad"})

        failure = outcome.error.failures[0]
        assert failure.stderr == "oops \ufffd"
        assert failure.exit_status == 3

    @pytest.mark.asyncio
    async def test_lost_channel_is_a_label_failure(
        self, executor: CommandBatchExecutor
    ) -> None:
        conn = FakeConnection(
            {
                "ok": Script(stdout="fine"),
                "boom": Script(error=OSError("Connection lost")),
            }
        )

        outcome = await executor.execute_batch(conn, {"ok": "ok", "boom": "boom"})

        assert outcome.facts == {"ok": "fine"}
        assert outcome.error.failures[0].reason == "Connection lost"

    @pytest.mark.asyncio
    async def test_empty_commands(self, executor: CommandBatchExecutor) -> None:
        conn = FakeConnection()

        outcome = await executor.execute_batch(conn, {})

        assert outcome.facts == {}
        assert outcome.error is None
        assert conn.close_calls == 1


class TestConnectionLifecycle:
    """The connection is closed exactly once on every path."""

    @pytest.mark.asyncio
    async def test_closed_after_success(self, executor: CommandBatchExecutor) -> None:
        conn = FakeConnection({"true": Script()})

        await executor.execute_batch(conn, {"t": "true"})

        assert conn.close_calls == 1
        assert conn.wait_closed_calls == 1

    @pytest.mark.asyncio
    async def test_allocation_failure_is_fatal(
        self, executor: CommandBatchExecutor
    ) -> None:
        """A refused channel stops allocation and reports SessionAllocationError."""
        conn = FakeConnection(
            {"a": Script(stdout="1"), "b": Script(stdout="2"), "c": Script(stdout="3")},
            refuse_after=1,
        )

        outcome = await executor.execute_batch(conn, {"a": "a", "b": "b", "c": "c"}, "u@h")

        assert outcome.facts == {}
        assert isinstance(outcome.error, SessionAllocationError)
        assert outcome.error.label == "b"
        assert conn.started == ["a"]
        assert conn.processes[0].closed
        assert conn.close_calls == 1

    @pytest.mark.asyncio
    async def test_deadline_closes_running_commands(
        self, executor: CommandBatchExecutor
    ) -> None:
        """Commands still running at the deadline are reported, not awaited."""
        conn = FakeConnection(
            {"quick": Script(stdout="done"), "stuck": Script(stdout="never", delay=3600)}
        )

        outcome = await executor.execute_batch(
            conn, {"quick": "quick", "stuck": "stuck"}, deadline=Deadline(0.05)
        )

        assert outcome.facts == {"quick": "done"}
        assert outcome.error.failures[0].label == "stuck"
        assert outcome.error.failures[0].reason == "deadline exceeded"
        assert conn.processes[1].closed
        assert conn.close_calls == 1
