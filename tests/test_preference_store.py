"""Tests for the preference store."""

import threading

import pytest

from writeright.models.preferences import (
    Feedback,
    PreferencesUpdate,
    Proficiency,
    Tone,
    UserHistory,
    UserPreferences,
)
from writeright.storage.backends import InMemoryStore, StorageUnavailableError
from writeright.storage.preferences import (
    LOCK_STRIPES,
    LookupStatus,
    PreferenceStore,
    history_key,
    preferences_key,
)


class BrokenStore:
    """Backend whose every call fails."""

    def get(self, key):
        raise StorageUnavailableError("down")

    def set(self, key, value):
        raise StorageUnavailableError("down")


class ReadOnlyStore(InMemoryStore):
    def set(self, key, value):
        raise StorageUnavailableError("read only")


@pytest.fixture
def backend():
    return InMemoryStore()


@pytest.fixture
def store(backend):
    return PreferenceStore(backend)


class TestKeys:
    def test_key_convention(self):
        assert preferences_key("alice") == "user:alice:preferences"
        assert history_key("alice") == "user:alice:history"


class TestReads:
    def test_default_preferences(self, store):
        prefs = store.get_preferences("new_user")
        assert prefs.tone == Tone.PROFESSIONAL
        assert prefs.goals == ["clarity", "professionalism"]
        assert prefs.proficiency == Proficiency.INTERMEDIATE

    def test_default_history(self, store):
        history = store.get_history("new_user")
        assert history.common_mistakes == []
        assert history.improvement_history == []
        assert history.sessions == 0

    def test_get_preferences_idempotent(self, store):
        store.update_preferences("bob", PreferencesUpdate(tone=Tone.ACADEMIC))
        assert store.get_preferences("bob") == store.get_preferences("bob")

    def test_lookup_status_missing(self, store):
        prefs, status = store.load_preferences("nobody")
        assert status is LookupStatus.MISSING
        assert prefs == UserPreferences()

    def test_lookup_status_found(self, store):
        store.record_feedback("carol", Feedback(mistake_type="spelling"))
        _, status = store.load_history("carol")
        assert status is LookupStatus.FOUND

    def test_unavailable_reads_degrade(self):
        store = PreferenceStore(BrokenStore())
        assert store.get_preferences("x") == UserPreferences()
        assert store.get_history("x") == UserHistory()
        assert store.load_history("x")[1] is LookupStatus.UNAVAILABLE

    def test_corrupt_record_degrades(self, backend, store):
        backend.set(preferences_key("dave"), {"tone": "shouty"})
        prefs, status = store.load_preferences("dave")
        assert prefs == UserPreferences()
        assert status is LookupStatus.INVALID

    def test_invalid_history_replaced_on_feedback(self, backend, store):
        backend.set(history_key("ola"), {"sessions": "many"})
        assert store.load_history("ola")[1] is LookupStatus.INVALID

        result = store.record_feedback("ola", Feedback(mistake_type="spelling"))
        assert result.success is True
        assert result.history.sessions == 1
        assert result.history.common_mistakes == ["spelling"]
        assert result.history.first_session is not None
        assert store.load_history("ola")[1] is LookupStatus.FOUND

    def test_invalid_preferences_replaced_on_update(self, backend, store):
        backend.set(preferences_key("pat"), {"tone": "shouty", "goals": ["voice"]})

        result = store.update_preferences("pat", PreferencesUpdate(tone=Tone.CASUAL))
        assert result.success is True
        assert result.preferences.tone == Tone.CASUAL
        assert result.preferences.goals == ["clarity", "professionalism"]
        assert store.load_preferences("pat")[1] is LookupStatus.FOUND


class TestUpdatePreferences:
    def test_shallow_merge(self, store):
        store.update_preferences(
            "erin", PreferencesUpdate(tone=Tone.CASUAL, goals=["brevity"])
        )
        result = store.update_preferences(
            "erin", PreferencesUpdate(proficiency=Proficiency.ADVANCED)
        )
        assert result.success is True
        assert result.updated.preferences is True
        assert result.updated.history is False
        prefs = store.get_preferences("erin")
        assert prefs.tone == Tone.CASUAL
        assert prefs.goals == ["brevity"]
        assert prefs.proficiency == Proficiency.ADVANCED

    def test_stamps_updated_at(self, store):
        result = store.update_preferences("fay", PreferencesUpdate())
        assert result.preferences.updated_at is not None
        assert store.get_preferences("fay").updated_at == result.preferences.updated_at

    def test_unset_fields_use_defaults(self, store):
        result = store.update_preferences("gus", PreferencesUpdate(tone=Tone.CREATIVE))
        assert result.preferences.tone == Tone.CREATIVE
        assert result.preferences.goals == ["clarity", "professionalism"]

    def test_storage_failure_reported(self):
        store = PreferenceStore(BrokenStore())
        result = store.update_preferences("x", PreferencesUpdate(tone=Tone.CASUAL))
        assert result.success is False
        assert result.updated.preferences is False
        assert result.error

    def test_duplicate_goals_collapsed(self, store):
        result = store.update_preferences(
            "quin", PreferencesUpdate(goals=["brevity", "clarity", "brevity"])
        )
        assert result.preferences.goals == ["brevity", "clarity"]
        assert store.get_preferences("quin").goals == ["brevity", "clarity"]

    def test_write_failure_reported(self):
        store = PreferenceStore(ReadOnlyStore())
        result = store.update_preferences("x", PreferencesUpdate(tone=Tone.CASUAL))
        assert result.success is False


class TestRecordFeedback:
    def test_twice_same_mistake(self, store):
        store.record_feedback("hal", Feedback(mistake_type="spelling"))
        result = store.record_feedback("hal", Feedback(mistake_type="spelling"))
        assert result.success is True
        assert result.updated.history is True
        history = store.get_history("hal")
        assert history.sessions == 2
        assert history.common_mistakes.count("spelling") == 1
        assert len(history.improvement_history) == 2

    def test_first_and_last_session(self, store):
        first = store.record_feedback("ivy", Feedback(improvement_area="clarity")).history
        assert first.first_session is not None
        assert first.last_session == first.first_session
        second = store.record_feedback("ivy", Feedback()).history
        assert second.first_session == first.first_session
        assert second.last_session >= first.last_session

    def test_feedback_without_mistake(self, store):
        history = store.record_feedback(
            "jay", Feedback(improvement_area="tone", context="email")
        ).history
        assert history.common_mistakes == []
        event = history.improvement_history[0]
        assert event.improvement_area == "tone"
        assert event.context == "email"
        assert event.timestamp is not None

    def test_mistakes_accumulate(self, store):
        store.record_feedback("kim", Feedback(mistake_type="spelling"))
        store.record_feedback("kim", Feedback(mistake_type="subject_verb_agreement"))
        store.record_feedback("kim", Feedback())
        history = store.get_history("kim")
        assert history.common_mistakes == ["spelling", "subject_verb_agreement"]

    def test_users_isolated(self, store):
        store.record_feedback("lee", Feedback(mistake_type="spelling"))
        assert store.get_history("max").sessions == 0

    def test_storage_failure_reported(self):
        store = PreferenceStore(BrokenStore())
        result = store.record_feedback("x", Feedback(mistake_type="spelling"))
        assert result.success is False
        assert result.updated.history is False

    def test_concurrent_feedback_not_lost(self, store):
        threads = [
            threading.Thread(
                target=store.record_feedback,
                args=("ned", Feedback(mistake_type=f"type_{i % 3}")),
            )
            for i in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        history = store.get_history("ned")
        assert history.sessions == 20
        assert len(history.improvement_history) == 20
        assert sorted(history.common_mistakes) == ["type_0", "type_1", "type_2"]


class TestLocks:
    def test_lock_count_does_not_grow_with_users(self, store):
        for i in range(500):
            store.record_feedback(f"user_{i}", Feedback())
        assert len(store._locks) == LOCK_STRIPES

    def test_same_user_same_lock(self, store):
        assert store._user_lock("rae") is store._user_lock("rae")
