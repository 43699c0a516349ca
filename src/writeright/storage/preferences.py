"""Per-user preferences and mistake history on top of a key-value backend."""

import threading
from datetime import datetime
from enum import StrEnum

import structlog
from pydantic import ValidationError

from writeright.models.preferences import (
    Feedback,
    FeedbackEvent,
    PreferencesUpdate,
    UpdatedFlags,
    UserHistory,
    UserPreferences,
    WriteResult,
)
from writeright.storage.backends import KeyValueStore, StorageUnavailableError

logger = structlog.get_logger()

LOCK_STRIPES = 64


def preferences_key(user_id: str) -> str:
    return f"user:{user_id}:preferences"


def history_key(user_id: str) -> str:
    return f"user:{user_id}:history"


class LookupStatus(StrEnum):
    FOUND = "found"
    MISSING = "missing"
    INVALID = "invalid"  # stored, but fails validation
    UNAVAILABLE = "unavailable"


class PreferenceStore:
    """Reads never raise: a missing, invalid or unreachable record yields defaults.

    Writes are serialized per user and report storage failures through
    ``WriteResult.success`` instead of raising. A stored record that fails
    validation is replaced by the next write.

    Args:
        backend: Key-value store holding the JSON records.
    """

    def __init__(self, backend: KeyValueStore):
        self.backend = backend
        self._locks = [threading.Lock() for _ in range(LOCK_STRIPES)]

    def _user_lock(self, user_id: str) -> threading.Lock:
        return self._locks[hash(user_id) % LOCK_STRIPES]

    def _read(self, key: str) -> tuple[dict | None, LookupStatus]:
        try:
            data = self.backend.get(key)
        except StorageUnavailableError:
            logger.warning("preference_store_unavailable", key=key, exc_info=True)
            return None, LookupStatus.UNAVAILABLE
        if data is None:
            return None, LookupStatus.MISSING
        return data, LookupStatus.FOUND

    def load_preferences(self, user_id: str) -> tuple[UserPreferences, LookupStatus]:
        data, status = self._read(preferences_key(user_id))
        if data is None:
            return UserPreferences(), status
        try:
            return UserPreferences(**data), status
        except ValidationError:
            logger.warning("preferences_record_invalid", user_id=user_id, record=data)
            return UserPreferences(), LookupStatus.INVALID

    def load_history(self, user_id: str) -> tuple[UserHistory, LookupStatus]:
        data, status = self._read(history_key(user_id))
        if data is None:
            return UserHistory(), status
        try:
            return UserHistory(**data), status
        except ValidationError:
            logger.warning("history_record_invalid", user_id=user_id, record=data)
            return UserHistory(), LookupStatus.INVALID

    def get_preferences(self, user_id: str) -> UserPreferences:
        return self.load_preferences(user_id)[0]

    def get_history(self, user_id: str) -> UserHistory:
        return self.load_history(user_id)[0]

    def update_preferences(self, user_id: str, partial: PreferencesUpdate) -> WriteResult:
        """Shallow-merge the fields set on ``partial`` over the stored record."""
        with self._user_lock(user_id):
            current, status = self.load_preferences(user_id)
            if status is LookupStatus.UNAVAILABLE:
                return WriteResult(success=False, error="storage unavailable")
            if status is LookupStatus.INVALID:
                logger.warning("preferences_record_discarded", user_id=user_id)

            merged = current.model_dump(mode="json")
            merged.update(partial.model_dump(mode="json", exclude_none=True))
            merged["updated_at"] = datetime.now().isoformat()
            preferences = UserPreferences(**merged)

            try:
                self.backend.set(preferences_key(user_id), preferences.model_dump(mode="json"))
            except StorageUnavailableError as e:
                logger.error("preferences_write_failed", user_id=user_id, error=str(e))
                return WriteResult(success=False, error="storage unavailable")

        logger.info("preferences_updated", user_id=user_id, tone=preferences.tone)
        return WriteResult(
            success=True,
            updated=UpdatedFlags(preferences=True),
            preferences=preferences,
        )

    def record_feedback(self, user_id: str, feedback: Feedback) -> WriteResult:
        """Append a feedback event and count it as a session."""
        with self._user_lock(user_id):
            history, status = self.load_history(user_id)
            if status is LookupStatus.UNAVAILABLE:
                return WriteResult(success=False, error="storage unavailable")
            if status is LookupStatus.INVALID:
                logger.warning("history_record_discarded", user_id=user_id)

            now = datetime.now()
            if status is not LookupStatus.FOUND:
                history.first_session = now

            if feedback.mistake_type and feedback.mistake_type not in history.common_mistakes:
                history.common_mistakes.append(feedback.mistake_type)

            history.improvement_history.append(
                FeedbackEvent(**feedback.model_dump(), timestamp=now)
            )
            history.sessions += 1
            history.last_session = now

            try:
                self.backend.set(history_key(user_id), history.model_dump(mode="json"))
            except StorageUnavailableError as e:
                logger.error("history_write_failed", user_id=user_id, error=str(e))
                return WriteResult(success=False, error="storage unavailable")

        logger.info(
            "feedback_recorded",
            user_id=user_id,
            mistake_type=feedback.mistake_type,
            sessions=history.sessions,
        )
        return WriteResult(success=True, updated=UpdatedFlags(history=True), history=history)
