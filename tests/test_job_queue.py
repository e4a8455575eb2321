import asyncio

import pytest

from conftest import StubAnalysisClient, make_image
from models.analysis_mode import SEARCH_BASIC, VISION_STANDARD
from models.analysis_models import JobStatus
from models.errors import ConflictError, NotFoundError
from services.queue.batch_processor import BatchProcessor
from services.queue.job_queue import JobQueue
from services.result_store import ResultStore


@pytest.fixture
def store(tmp_path):
    return ResultStore(tmp_path / "analyses")


def _queue(client, pacer, store, batch_size=5) -> JobQueue:
    return JobQueue(BatchProcessor(client, pacer=pacer, batch_size=batch_size), store)


async def _until(predicate, attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


async def test_submitted_job_completes_and_is_persisted(pacer, store):
    job_queue = _queue(StubAnalysisClient(), pacer, store)

    job = job_queue.submit([make_image("a.jpg"), make_image("b.jpg")], VISION_STANDARD, "  Homepage  ")
    assert job.status is JobStatus.QUEUED
    assert job_queue.is_processing

    await job_queue.wait_idle()

    assert job.status is JobStatus.COMPLETED
    assert len(job.results) == 2
    assert len(job_queue) == 0
    assert not job_queue.is_processing

    record = await store.get(job.record_key)
    assert record.id == job.id
    assert record.name == "Homepage"
    assert record.status == "completed"
    assert record.mode == "vision-standard"
    assert record.text_output.startswith("Added the folder to the project")
    assert "\n\n---\n\n" in record.text_output


async def test_only_one_job_processes_at_a_time(pacer, store):
    gate = asyncio.Event()
    client = StubAnalysisClient(gate=gate)
    job_queue = _queue(client, pacer, store)

    jobs = [job_queue.submit([make_image(f"j{i}.jpg")], SEARCH_BASIC, f"job {i}") for i in range(4)]
    await _until(lambda: client.calls)

    statuses = [job.status for job in jobs]
    assert statuses.count(JobStatus.PROCESSING) == 1
    assert jobs[0].status is JobStatus.PROCESSING

    gate.set()
    await job_queue.wait_idle()

    assert client.max_active == 1
    assert client.calls == ["j0.jpg", "j1.jpg", "j2.jpg", "j3.jpg"]
    assert all(job.status is JobStatus.COMPLETED for job in jobs)


async def test_pause_between_consecutive_jobs(pacer, recording_sleep, store):
    job_queue = _queue(StubAnalysisClient(), pacer, store)

    job_queue.submit([make_image("a.jpg")], SEARCH_BASIC)
    job_queue.submit([make_image("b.jpg")], SEARCH_BASIC)
    await job_queue.wait_idle()

    assert recording_sleep.waits == [1.0]


async def test_remove_queued_job_keeps_order_of_the_rest(pacer, store):
    gate = asyncio.Event()
    client = StubAnalysisClient(gate=gate)
    job_queue = _queue(client, pacer, store)

    first = job_queue.submit([make_image("1.jpg")], SEARCH_BASIC, "first")
    second = job_queue.submit([make_image("2.jpg")], SEARCH_BASIC, "second")
    third = job_queue.submit([make_image("3.jpg")], SEARCH_BASIC, "third")
    await _until(lambda: client.calls)

    removed = job_queue.remove(second.id)

    assert removed is second
    assert [item["id"] for item in job_queue.list()] == [first.id, third.id]

    gate.set()
    await job_queue.wait_idle()
    assert client.calls == ["1.jpg", "3.jpg"]


async def test_remove_processing_job_is_a_conflict(pacer, store):
    gate = asyncio.Event()
    client = StubAnalysisClient(gate=gate)
    job_queue = _queue(client, pacer, store)

    running = job_queue.submit([make_image("1.jpg")], SEARCH_BASIC)
    waiting = job_queue.submit([make_image("2.jpg")], SEARCH_BASIC)
    await _until(lambda: client.calls)
    before = job_queue.list()

    with pytest.raises(ConflictError):
        job_queue.remove(running.id)
    assert job_queue.list() == before

    gate.set()
    await job_queue.wait_idle()
    assert waiting.status is JobStatus.COMPLETED


async def test_remove_unknown_job_is_not_found(pacer, store):
    job_queue = _queue(StubAnalysisClient(), pacer, store)

    with pytest.raises(NotFoundError):
        job_queue.remove("missing")


async def test_failing_image_still_completes_the_job(pacer, store):
    job_queue = _queue(StubAnalysisClient(fail_names={"bad.jpg"}), pacer, store)

    job = job_queue.submit([make_image("ok.jpg"), make_image("bad.jpg"), make_image("ok2.jpg")], VISION_STANDARD)
    await job_queue.wait_idle()

    assert job.status is JobStatus.COMPLETED
    assert [r.failed for r in job.results] == [False, True, False]
    assert job.error_message is None


async def test_setup_failure_marks_job_failed_without_partial_results(pacer, store):
    job_queue = _queue(StubAnalysisClient(available=False), pacer, store)

    job = job_queue.submit([make_image("a.jpg"), make_image("b.jpg")], VISION_STANDARD, "broken")
    await job_queue.wait_idle()

    assert job.status is JobStatus.FAILED
    assert "vision" in job.error_message
    assert len(job.results) == 2
    assert all(r.failed for r in job.results)

    record = await store.get(job.record_key)
    assert record.status == "failed"
    assert record.error_message == job.error_message
    assert all(r.failed for r in record.results)


async def test_queue_continues_after_a_failed_job(pacer, store):
    client = StubAnalysisClient()
    job_queue = _queue(client, pacer, store)

    bad = job_queue.submit([], VISION_STANDARD)
    good = job_queue.submit([make_image("a.jpg")], VISION_STANDARD)

    original_process = job_queue.processor.process

    async def flaky_process(job):
        if job is bad:
            raise RuntimeError("disk on fire")
        return await original_process(job)

    job_queue.processor.process = flaky_process
    await job_queue.wait_idle()

    assert bad.status is JobStatus.FAILED
    assert bad.error_message == "disk on fire"
    assert good.status is JobStatus.COMPLETED


async def test_aclose_cancels_the_worker(pacer, store):
    gate = asyncio.Event()
    client = StubAnalysisClient(gate=gate)
    job_queue = _queue(client, pacer, store)

    job_queue.submit([make_image("a.jpg")], SEARCH_BASIC)
    await _until(lambda: client.calls)
    await job_queue.aclose()

    assert not job_queue.is_processing
