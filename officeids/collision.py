"""
Collision checks against the record store.

Store failure policy: by default a failed existence check is treated as
"not found", so allocation keeps working while the store is flaky
(availability over consistency). Every such failure is logged at WARNING,
counted in ``failures`` and passed to the ``on_store_error`` hook so the
degradation is visible. With ``strict=True`` the failure is raised as
CollisionCheckFailedError instead and the caller decides what to do.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from .codec import DEFAULT_CODEC, IdentifierCodec
from .errors import CollisionCheckFailedError, InvalidFormatError
from .store import RecordStore

logger = logging.getLogger(__name__)

StoreErrorHook = Callable[[str, Exception], None]


@dataclass(frozen=True)
class CollisionInfo:
    found: bool
    existing_office_id: Optional[str] = None
    existing_office_name: Optional[str] = None
    collision_type: Optional[str] = None  # "exact" | "similar"


class CollisionChecker:
    """Wraps RecordStore.exists() with the store failure policy."""

    def __init__(
        self,
        store: RecordStore,
        on_store_error: Optional[StoreErrorHook] = None,
        strict: bool = False,
        codec: Optional[IdentifierCodec] = None,
    ):
        self.store = store
        self.on_store_error = on_store_error
        self.strict = strict
        self.codec = codec or DEFAULT_CODEC
        self._failures = 0
        self._lock = threading.Lock()

    @property
    def failures(self) -> int:
        """Number of store failures seen so far."""
        with self._lock:
            return self._failures

    def exists(self, office_id: str) -> bool:
        """
        Return True if office_id is already taken.

        Raises:
            CollisionCheckFailedError: Store failed and strict mode is on
        """
        try:
            return bool(self.store.exists(office_id))
        except Exception as e:
            self._record_failure(office_id, e)
            if self.strict:
                raise CollisionCheckFailedError(
                    f"Collision check failed for {office_id}: {e}"
                ) from e
            return False

    def is_available(self, office_id: str) -> bool:
        return not self.exists(office_id)

    def collision_info(self, office_id: str) -> CollisionInfo:
        """
        Describe the record that owns office_id, if any.

        Raises:
            InvalidFormatError: If office_id is not a valid identifier
        """
        self.codec.parse(office_id)
        if not self.exists(office_id):
            return CollisionInfo(found=False)

        name = None
        try:
            record = self.store.read(office_id)
        except Exception as e:
            logger.warning(f"Could not read record {office_id}: {e}")
            record = None
        if record:
            name = record.get("name")
        return CollisionInfo(
            found=True,
            existing_office_id=office_id,
            existing_office_name=name,
            collision_type="exact",
        )

    def similar(self, country: str, city_code: str) -> List[CollisionInfo]:
        """Existing ids that share the CCcc prefix, sorted by id."""
        prefix = f"{country}{city_code}".upper()
        matches = []
        for office_id in self.store.list_all():
            if not office_id.startswith(prefix):
                continue
            try:
                self.codec.parse(office_id)
            except InvalidFormatError:
                continue
            matches.append(office_id)

        return [
            CollisionInfo(found=True, existing_office_id=office_id, collision_type="similar")
            for office_id in sorted(matches)
        ]

    def _record_failure(self, office_id: str, error: Exception) -> None:
        with self._lock:
            self._failures += 1
        if self.strict:
            logger.warning(f"Collision check failed for {office_id}: {error}")
        else:
            logger.warning(
                f"Collision check failed for {office_id}, assuming available: {error}"
            )
        if self.on_store_error is not None:
            try:
                self.on_store_error(office_id, error)
            except Exception:
                logger.exception(f"on_store_error hook failed for {office_id}")
