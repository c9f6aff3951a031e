# tests/unit/batch/test_unit_scheduler.py — v1
"""Tests for batch/scheduler.py — bounded concurrency and per-item outcomes."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from passportscan.batch.dedup import NoDuplicateDetection
from passportscan.batch.models import ScanStatus
from passportscan.batch.scheduler import BatchScheduler
from passportscan.batch.session import BatchSession
from passportscan.core.errors import BatchInProgressError, ProviderError


def _session(document_factory, names, **kwargs) -> BatchSession:
    session = BatchSession(**kwargs)
    session.add_documents([document_factory(name) for name in names])
    return session


class TestConstruction:
    def test_rejects_zero_concurrency(self, fake_client, seeded_normalizer):
        with pytest.raises(ValueError):
            BatchScheduler(fake_client, seeded_normalizer, concurrency=0)

    def test_rejects_non_positive_timeout(self, fake_client, seeded_normalizer):
        with pytest.raises(ValueError):
            BatchScheduler(fake_client, seeded_normalizer, item_timeout_s=0)


class TestRun:
    @pytest.mark.asyncio
    async def test_all_items_complete(self, fake_client, seeded_normalizer, document_factory):
        session = _session(document_factory, [f"f{i}.jpg" for i in range(7)])
        summary = await BatchScheduler(fake_client, seeded_normalizer, concurrency=3).run(session)
        assert summary.completed == 7
        assert summary.pending == summary.processing == 0
        assert session.processing is False
        assert sorted(fake_client.calls) == sorted(f"f{i}.jpg" for i in range(7))

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, fake_client_cls, seeded_normalizer, document_factory):
        names = [f"f{i}.jpg" for i in range(12)]
        client = fake_client_cls(delays={name: 0.02 for name in names})
        scheduler = BatchScheduler(client, seeded_normalizer, concurrency=4)
        await scheduler.run(_session(document_factory, names))
        assert client.max_in_flight == 4
        assert scheduler.max_in_flight <= 4

    @pytest.mark.asyncio
    async def test_failure_does_not_abort_batch(
        self, fake_client_cls, seeded_normalizer, document_factory,
    ):
        client = fake_client_cls(results={"bad.jpg": ProviderError(500, "oops")})
        session = _session(document_factory, ["a.jpg", "bad.jpg", "c.jpg"])
        summary = await BatchScheduler(client, seeded_normalizer).run(session)
        assert summary.completed == 2
        assert summary.errors == 1
        bad = session.items[1]
        assert bad.status is ScanStatus.ERROR
        assert "500" in bad.error

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("first_delay", "second_delay", "winner"),
        [(0.05, 0.005, 1), (0.005, 0.05, 0)],
        ids=["later-submitted-resolves-first", "earlier-submitted-resolves-first"],
    )
    async def test_first_resolved_wins_duplicate(
        self, fake_client_cls, raw_factory, seeded_normalizer, document_factory,
        first_delay, second_delay, winner,
    ):
        same = raw_factory("SAME1")
        client = fake_client_cls(
            results={"first.jpg": same, "second.jpg": same},
            delays={"first.jpg": first_delay, "second.jpg": second_delay},
        )
        session = _session(document_factory, ["first.jpg", "second.jpg"])
        summary = await BatchScheduler(client, seeded_normalizer, concurrency=2).run(session)
        assert session.items[winner].status is ScanStatus.COMPLETED
        assert session.items[1 - winner].status is ScanStatus.DUPLICATE
        assert summary.completed == 1
        assert summary.duplicates == 1

    @pytest.mark.asyncio
    async def test_dedup_disabled(self, fake_client_cls, raw_factory, seeded_normalizer, document_factory):
        client = fake_client_cls(default=raw_factory("SAME1"))
        session = _session(
            document_factory, ["a.jpg", "b.jpg"], detector=NoDuplicateDetection(),
        )
        summary = await BatchScheduler(client, seeded_normalizer).run(session)
        assert summary.completed == 2

    @pytest.mark.asyncio
    async def test_timeout_marks_error(self, fake_client_cls, seeded_normalizer, document_factory):
        client = fake_client_cls(delays={"hang.jpg": 1.0})
        session = _session(document_factory, ["hang.jpg", "ok.jpg"])
        scheduler = BatchScheduler(client, seeded_normalizer, item_timeout_s=0.05)
        summary = await scheduler.run(session)
        assert session.items[0].status is ScanStatus.ERROR
        assert "timed out" in session.items[0].error
        assert summary.completed == 1

    @pytest.mark.asyncio
    async def test_normalization_failure_marks_error(self, fake_client, document_factory):
        normalizer = MagicMock()
        normalizer.normalize.side_effect = ValueError("bad date")
        session = _session(document_factory, ["a.jpg"])
        await BatchScheduler(fake_client, normalizer).run(session)
        assert session.items[0].error == "Normalization failed: bad date"

    @pytest.mark.asyncio
    async def test_rejects_concurrent_run(self, fake_client, seeded_normalizer, document_factory):
        session = _session(document_factory, ["a.jpg"])
        session.processing = True
        with pytest.raises(BatchInProgressError):
            await BatchScheduler(fake_client, seeded_normalizer).run(session)

    @pytest.mark.asyncio
    async def test_only_pending_items_are_scanned(
        self, fake_client, seeded_normalizer, document_factory,
    ):
        session = _session(document_factory, ["a.jpg"])
        scheduler = BatchScheduler(fake_client, seeded_normalizer)
        await scheduler.run(session)
        session.add_documents([document_factory("b.jpg")])
        summary = await scheduler.run(session)
        assert fake_client.calls == ["a.jpg", "b.jpg"]
        assert summary.completed == 2

    @pytest.mark.asyncio
    async def test_empty_session(self, fake_client, seeded_normalizer):
        summary = await BatchScheduler(fake_client, seeded_normalizer).run(BatchSession())
        assert summary.total == 0


class TestUpdates:
    @pytest.mark.asyncio
    async def test_on_update_sees_each_transition(
        self, fake_client, seeded_normalizer, document_factory,
    ):
        seen: list[ScanStatus] = []
        scheduler = BatchScheduler(
            fake_client, seeded_normalizer, on_update=lambda item: seen.append(item.status),
        )
        await scheduler.run(_session(document_factory, ["a.jpg"]))
        assert seen == [ScanStatus.PROCESSING, ScanStatus.COMPLETED]

    @pytest.mark.asyncio
    async def test_failing_callback_is_ignored(
        self, fake_client, seeded_normalizer, document_factory,
    ):
        def explode(item):
            raise RuntimeError("ui gone")

        scheduler = BatchScheduler(fake_client, seeded_normalizer, on_update=explode)
        summary = await scheduler.run(_session(document_factory, ["a.jpg"]))
        assert summary.completed == 1

    @pytest.mark.asyncio
    async def test_run_is_cancellation_safe(
        self, fake_client_cls, seeded_normalizer, document_factory,
    ):
        client = fake_client_cls(delays={"a.jpg": 1.0})
        session = _session(document_factory, ["a.jpg"])
        task = asyncio.create_task(BatchScheduler(client, seeded_normalizer).run(session))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.processing is False
        assert session.in_flight == 0
        assert session.items[0].status is ScanStatus.ERROR
        assert session.items[0].error == "Batch cancelled"
        assert session.summary().processing == 0
