"""Unit tests for bounded concurrency."""

import anyio
import pytest

from repohistory.exceptions import BatchOperationError
from repohistory.utils import gather_bounded

pytestmark = pytest.mark.anyio


class TestGatherBounded:
    async def test_preserves_input_order(self) -> None:
        async def delayed(value: int) -> int:
            await anyio.sleep((5 - value) * 0.01)
            return value * 10

        results = await gather_bounded(range(5), 5, delayed)

        assert results == [0, 10, 20, 30, 40]

    async def test_limits_operations_in_flight(self) -> None:
        in_flight = 0
        peak = 0

        async def track(_: int) -> None:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await anyio.sleep(0.01)
            in_flight -= 1

        _ = await gather_bounded(list(range(10)), 3, track)

        assert peak == 3

    async def test_empty_batch(self) -> None:
        async def never(_: int) -> int:
            raise AssertionError

        assert await gather_bounded([], 2, never) == []

    async def test_failure_reports_index_and_cause(self) -> None:
        async def fail_on_seven(value: int) -> int:
            if value == 7:
                msg = "boom"
                raise RuntimeError(msg)
            return value

        with pytest.raises(BatchOperationError) as exc_info:
            _ = await gather_bounded(list(range(10)), 3, fail_on_seven)

        assert exc_info.value.index == 7
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert "item 7" in str(exc_info.value)

    @pytest.mark.parametrize("max_parallel", [0, -1])
    async def test_rejects_non_positive_limit(self, max_parallel: int) -> None:
        async def identity(value: int) -> int:
            return value

        with pytest.raises(ValueError, match="at least 1"):
            _ = await gather_bounded([1], max_parallel, identity)
