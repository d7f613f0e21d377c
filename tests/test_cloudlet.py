from __future__ import annotations

from websim.cloudlet import CloudletStatus, WebCloudlet


def test_new_cloudlet_is_unassigned_and_not_finished() -> None:
    c = WebCloudlet(ideal_start_time=3.0, length=2.0)
    assert c.status is CloudletStatus.CREATED
    assert not c.is_finished()
    assert c.target_host_id is None
    assert c.session_id is None
    assert c.delay is None


def test_lifecycle_records_times() -> None:
    c = WebCloudlet(ideal_start_time=3.0)
    c.mark_dispatched(4.5)
    assert c.status is CloudletStatus.DISPATCHED
    assert not c.is_finished()
    assert c.delay == 1.5

    c.mark_finished(6.0)
    assert c.is_finished()
    assert c.finish_time == 6.0


def test_failed_counts_as_finished() -> None:
    c = WebCloudlet(ideal_start_time=0.0)
    c.mark_failed(1.0)
    assert c.status is CloudletStatus.FAILED
    assert c.is_finished()


def test_cloudlets_compare_by_identity() -> None:
    a = WebCloudlet(ideal_start_time=1.0)
    b = WebCloudlet(ideal_start_time=1.0)
    assert a != b
    assert a == a
    assert "ideal_start_time=1.0" in str(a)
