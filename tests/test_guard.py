"""Tests for roost.stack.guard — pop interception state machine."""

import asyncio

import pytest

from roost.errors import ConfigurationError, GuardBusyError, NavigationError, NoPendingDecisionError
from roost.routing.route import PageDescriptor
from roost.stack.entry import StackEntry
from roost.stack.guard import BackNavigationGuard, GuardState, VetoDecision


def _entry(content: object) -> StackEntry:
    return StackEntry(PageDescriptor("/editor", content))


class TestRegistration:
    def test_unguarded_entry(self) -> None:
        guard = BackNavigationGuard()
        assert guard.guard_for(_entry("page")) is None

    def test_guard_keyed_by_content_identity(self) -> None:
        guard = BackNavigationGuard()
        content = ["draft"]
        fn = lambda page, result: True  # noqa: E731
        guard.register(content, fn)

        assert guard.guard_for(_entry(content)) is fn
        assert guard.guard_for(_entry(["draft"])) is None

    def test_unregister(self) -> None:
        guard = BackNavigationGuard()
        content = object()
        guard.register(content, lambda page, result: True)
        guard.unregister(content)
        assert guard.guard_for(_entry(content)) is None
        assert len(guard) == 0

    def test_release(self) -> None:
        guard = BackNavigationGuard()
        content = ["draft"]
        guard.register(content, lambda page, result: True)
        guard.release(["draft"])
        assert len(guard) == 1
        guard.release(content)
        assert len(guard) == 0

    def test_non_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            BackNavigationGuard().register(object(), "nope")  # type: ignore[arg-type]


class TestImmediateDecisions:
    @pytest.mark.asyncio
    async def test_unguarded_allows(self) -> None:
        guard = BackNavigationGuard()
        assert await guard.check(_entry("page")) is True
        assert guard.state is GuardState.IDLE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("answer", "allowed"),
        [
            (VetoDecision.ALLOW, True),
            (VetoDecision.DENY, False),
            (True, True),
            (False, False),
        ],
    )
    async def test_sync_answers(self, answer: object, allowed: bool) -> None:
        guard = BackNavigationGuard()
        content = object()
        guard.register(content, lambda page, result: answer)

        assert await guard.check(_entry(content)) is allowed
        assert guard.state is (GuardState.ALLOWED if allowed else GuardState.DENIED)
        assert guard.last_decision is (VetoDecision.ALLOW if allowed else VetoDecision.DENY)
        guard.settle()
        assert guard.state is GuardState.IDLE

    @pytest.mark.asyncio
    async def test_guard_sees_descriptor_and_result(self) -> None:
        guard = BackNavigationGuard()
        content = object()
        seen: list[object] = []

        def fn(page: PageDescriptor, result: object) -> bool:
            seen.extend([page.name, result])
            return True

        guard.register(content, fn)
        await guard.check(_entry(content), result="saved")
        assert seen == ["/editor", "saved"]

    @pytest.mark.asyncio
    async def test_invalid_answer(self) -> None:
        guard = BackNavigationGuard()
        content = object()
        guard.register(content, lambda page, result: "yes")

        with pytest.raises(ConfigurationError, match="VetoDecision"):
            await guard.check(_entry(content))
        assert guard.state is GuardState.IDLE


class TestPendingDecisions:
    @pytest.mark.asyncio
    async def test_async_confirmation_provider(self) -> None:
        guard = BackNavigationGuard()
        content = object()
        answer: asyncio.Future[bool] = asyncio.get_running_loop().create_future()

        async def confirm(page: PageDescriptor, result: object) -> bool:
            return await answer

        guard.register(content, confirm)
        task = asyncio.create_task(guard.check(_entry(content)))
        await asyncio.sleep(0)
        assert guard.state is GuardState.INTERCEPTED
        assert guard.busy is True

        answer.set_result(False)
        assert await task is False
        assert guard.state is GuardState.DENIED

    @pytest.mark.asyncio
    async def test_pending_resolved_out_of_band(self) -> None:
        guard = BackNavigationGuard()
        content = object()
        guard.register(content, lambda page, result: VetoDecision.PENDING)

        task = asyncio.create_task(guard.check(_entry(content)))
        await asyncio.sleep(0)
        assert guard.awaiting_confirmation is True

        guard.resolve(True)
        assert await task is True
        assert guard.awaiting_confirmation is False

    @pytest.mark.asyncio
    async def test_second_check_while_pending_is_rejected(self) -> None:
        guard = BackNavigationGuard()
        content = object()
        guard.register(content, lambda page, result: VetoDecision.PENDING)

        task = asyncio.create_task(guard.check(_entry(content)))
        await asyncio.sleep(0)

        with pytest.raises(GuardBusyError):
            await guard.check(_entry(content))

        guard.resolve(False)
        assert await task is False

    @pytest.mark.asyncio
    async def test_cancellation_returns_to_idle(self) -> None:
        guard = BackNavigationGuard()
        content = object()
        guard.register(content, lambda page, result: VetoDecision.PENDING)

        task = asyncio.create_task(guard.check(_entry(content)))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert guard.state is GuardState.IDLE
        assert guard.busy is False

    def test_resolve_without_pending_decision(self) -> None:
        with pytest.raises(NoPendingDecisionError, match="awaiting confirmation"):
            BackNavigationGuard().resolve(True)

    def test_resolve_without_pending_decision_is_navigation_error(self) -> None:
        with pytest.raises(NavigationError):
            BackNavigationGuard().resolve(False)
