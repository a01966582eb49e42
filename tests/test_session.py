"""Unit tests for verisight/services/session.py."""

import pytest

from tests.conftest import MOCK_MODEL_RESPONSE
from verisight.core.exceptions import SessionBusyError
from verisight.schemas.analysis import AnalysisResult
from verisight.schemas.session import SessionState
from verisight.services.session import AnalysisSession, SessionRegistry

RESULT = AnalysisResult.model_validate(MOCK_MODEL_RESPONSE)


def test_new_session_is_idle():
    session = AnalysisSession("s1")
    snap = session.snapshot()
    assert snap.state == SessionState.IDLE
    assert snap.media is None and snap.result is None and snap.error is None


def test_begin_then_complete(image_media):
    session = AnalysisSession("s1")
    token = session.begin(image_media)
    assert session.state == SessionState.LOADING

    assert session.complete(token, RESULT) is True
    snap = session.snapshot()
    assert snap.state == SessionState.RESULT
    assert snap.result == RESULT
    assert snap.media.file_name == "art.png"
    assert snap.media.preview == image_media.preview


def test_begin_then_fail(image_media):
    session = AnalysisSession("s1")
    token = session.begin(image_media)

    assert session.fail(token, "boom") is True
    assert session.state == SessionState.ERROR
    assert session.error == "boom"
    assert session.result is None


def test_second_submission_while_loading_is_rejected(image_media, audio_media):
    session = AnalysisSession("s1")
    token = session.begin(image_media)

    with pytest.raises(SessionBusyError):
        session.begin(audio_media)

    assert session.media == image_media
    session.complete(token, RESULT)
    assert session.media == image_media


def test_new_submission_replaces_previous_result(image_media, audio_media):
    session = AnalysisSession("s1")
    session.complete(session.begin(image_media), RESULT)

    session.begin(audio_media)
    assert session.result is None
    assert session.media == audio_media


def test_reset_after_result_clears_everything(image_media):
    session = AnalysisSession("s1")
    session.complete(session.begin(image_media), RESULT)

    session.reset()
    snap = session.snapshot()
    assert snap.state == SessionState.IDLE
    assert snap.media is None
    assert snap.result is None


def test_reset_during_loading_drops_late_result(image_media):
    session = AnalysisSession("s1")
    token = session.begin(image_media)
    session.reset()

    assert session.complete(token, RESULT) is False
    assert session.state == SessionState.IDLE
    assert session.result is None


def test_late_error_from_older_run_is_dropped(image_media, audio_media):
    session = AnalysisSession("s1")
    old = session.begin(image_media)
    session.reset()
    new = session.begin(audio_media)

    assert session.fail(old, "stale") is False
    assert session.complete(new, RESULT) is True
    assert session.media == audio_media


def test_fail_ingestion_does_not_touch_loading_session(image_media):
    session = AnalysisSession("s1")
    session.begin(image_media)
    session.fail_ingestion("unreadable")

    assert session.state == SessionState.LOADING
    assert session.error is None


def test_fail_ingestion_from_idle():
    session = AnalysisSession("s1")
    session.fail_ingestion("unreadable")

    assert session.state == SessionState.ERROR
    assert session.error == "unreadable"
    assert session.media is None


def test_registry_returns_same_session_per_id():
    registry = SessionRegistry()
    assert registry.get("a") is registry.get("a")
    assert registry.get("a") is not registry.get("b")
    assert len(registry) == 2


# ---------------------------------------------------------------------------
# Registry eviction
# ---------------------------------------------------------------------------


def test_find_does_not_create():
    registry = SessionRegistry()
    assert registry.find("ghost") is None
    assert len(registry) == 0


def test_expired_idle_sessions_are_evicted_at_limit():
    registry = SessionRegistry(max_sessions=3, idle_ttl_sec=60)
    for sid in ("a", "b", "c"):
        registry.get(sid)
    registry._sessions["a"].last_touched -= 120
    registry._sessions["b"].last_touched -= 120

    registry.get("d")

    assert "a" not in registry and "b" not in registry
    assert "c" in registry and "d" in registry
    assert len(registry) == 2


def test_least_recent_session_evicted_when_none_expired():
    registry = SessionRegistry(max_sessions=3, idle_ttl_sec=3_600)
    for offset, sid in enumerate(("old", "mid", "new")):
        registry.get(sid).last_touched -= 100 - offset

    registry.get("fresh")

    assert "old" not in registry
    assert all(sid in registry for sid in ("mid", "new", "fresh"))
    assert len(registry) == 3


def test_loading_sessions_are_never_evicted(image_media):
    registry = SessionRegistry(max_sessions=2, idle_ttl_sec=1)
    busy = registry.get("busy")
    busy.begin(image_media)
    busy.last_touched -= 1_000
    registry.get("idle").last_touched -= 1_000

    registry.get("new")

    assert "busy" in registry
    assert "idle" not in registry
    assert registry.find("busy").state == SessionState.LOADING


def test_many_distinct_ids_stay_bounded():
    registry = SessionRegistry(max_sessions=50, idle_ttl_sec=3_600)
    for i in range(200):
        registry.get(f"client-{i}")
    assert len(registry) <= 50
