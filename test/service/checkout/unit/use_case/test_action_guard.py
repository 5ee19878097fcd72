import anyio
import pytest

from src.service.checkout.app.action_guard import ActionGuard
from src.service.checkout.domain.checkout_errors import ActionPendingError


@pytest.mark.unit
class TestActionGuard:
    @pytest.mark.asyncio
    async def test_same_action_twice_is_rejected(self):
        guard = ActionGuard()

        async with guard.run('coupon'):
            assert guard.is_pending('coupon')
            with pytest.raises(ActionPendingError):
                async with guard.run('coupon'):
                    pass

        assert guard.busy is False

    @pytest.mark.asyncio
    async def test_exclusive_action_blocks_others(self):
        guard = ActionGuard()

        async with guard.run('payment', exclusive=True):
            with pytest.raises(ActionPendingError, match='payment'):
                async with guard.run('coupon'):
                    pass

    @pytest.mark.asyncio
    async def test_exclusive_action_rejected_while_another_is_pending(self):
        guard = ActionGuard()

        async with guard.run('coupon'):
            with pytest.raises(ActionPendingError):
                async with guard.run('payment', exclusive=True):
                    pass

    @pytest.mark.asyncio
    async def test_independent_actions_may_overlap(self):
        guard = ActionGuard()

        async with guard.run('list_coupons'):
            async with guard.run('coupon'):
                assert guard.is_pending('list_coupons') and guard.is_pending('coupon')

    @pytest.mark.asyncio
    async def test_released_after_failure(self):
        guard = ActionGuard()

        with pytest.raises(RuntimeError):
            async with guard.run('payment', exclusive=True):
                raise RuntimeError('boom')

        async with guard.run('coupon'):
            pass

    @pytest.mark.asyncio
    async def test_concurrent_double_submit(self):
        guard = ActionGuard()
        started = anyio.Event()
        release = anyio.Event()
        rejected: list[ActionPendingError] = []

        async def first() -> None:
            async with guard.run('payment', exclusive=True):
                started.set()
                await release.wait()

        async def second() -> None:
            await started.wait()
            try:
                async with guard.run('payment', exclusive=True):
                    pass
            except ActionPendingError as e:
                rejected.append(e)
            release.set()

        async with anyio.create_task_group() as tg:
            tg.start_soon(first)
            tg.start_soon(second)

        assert len(rejected) == 1
