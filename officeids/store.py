"""
Record store adapters.

The allocator only ever reads from the store: it asks whether an id exists,
lists every id for statistics, and (for diagnostics) reads the record that
owns a colliding id. Writing the office record is the caller's job.

Adapters:
- InMemoryRecordStore: dict-backed store for tests and local tooling
- FirestoreRestStore: read-only client for the Firestore REST API

Usage:
    from officeids.store import FirestoreRestStore

    store = FirestoreRestStore(project_id="my-project")
    store.exists("GBLO123")
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Iterator, Optional

import requests
from requests.exceptions import RequestException

from .config import (
    FIRESTORE_BASE_URL,
    LIST_PAGE_SIZE,
    OFFICES_COLLECTION,
    REQUEST_TIMEOUT_SECONDS,
    TRANSIENT_STATUS_CODES,
    Settings,
)
from .errors import RecordStoreError

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Read-only view of the persistent office records."""

    @abstractmethod
    def exists(self, office_id: str) -> bool:
        """Return True if a record with this id exists."""

    @abstractmethod
    def list_all(self) -> Iterator[str]:
        """Yield every record id."""

    def read(self, office_id: str) -> Optional[Dict[str, Any]]:
        """Return the record's fields, or None. Optional for adapters."""
        return None


class InMemoryRecordStore(RecordStore):
    """Thread-safe dict-backed store."""

    def __init__(self, records: Optional[Dict[str, Dict[str, Any]]] = None):
        self._records: Dict[str, Dict[str, Any]] = dict(records or {})
        self._lock = threading.Lock()

    @classmethod
    def from_ids(cls, ids: Iterable[str]) -> "InMemoryRecordStore":
        return cls({office_id: {} for office_id in ids})

    def add(self, office_id: str, record: Optional[Dict[str, Any]] = None) -> None:
        with self._lock:
            self._records[office_id] = dict(record or {})

    def remove(self, office_id: str) -> None:
        with self._lock:
            self._records.pop(office_id, None)

    def exists(self, office_id: str) -> bool:
        with self._lock:
            return office_id in self._records

    def list_all(self) -> Iterator[str]:
        with self._lock:
            ids = list(self._records)
        return iter(ids)

    def read(self, office_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get(office_id)
            return dict(record) if record is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


def _decode_value(value: Dict[str, Any]) -> Any:
    """Convert a Firestore REST typed value into a plain Python value."""
    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "timestampValue" in value:
        return value["timestampValue"]
    if "nullValue" in value:
        return None
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [_decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        return dict(value["geoPointValue"])
    return None


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {name: _decode_value(v) for name, v in (fields or {}).items()}


class FirestoreRestStore(RecordStore):
    """
    Read-only Firestore adapter over the REST API.

    Attributes:
        project_id: Google Cloud project id (from FIRESTORE_PROJECT_ID)
        api_key: Optional API key (from FIRESTORE_API_KEY)
        collection: Collection holding office records (default "offices")
        retries: Attempts per request on transient failures
        backoff: Base seconds to wait between retries (multiplied by attempt)
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        api_key: Optional[str] = None,
        collection: str = OFFICES_COLLECTION,
        auth_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        retries: int = 3,
        backoff: float = 1.0,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        page_size: int = LIST_PAGE_SIZE,
    ):
        if not project_id:
            raise ValueError("Firestore project id is required (FIRESTORE_PROJECT_ID)")
        if retries < 1:
            raise ValueError(f"retries must be >= 1, got {retries}")
        self.project_id = project_id
        self.api_key = api_key
        self.collection = collection
        self.session = session or requests.Session()
        self.retries = retries
        self.backoff = backoff
        self.timeout = timeout
        self.page_size = page_size
        if auth_token:
            self.session.headers.update({"Authorization": f"Bearer {auth_token}"})

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "FirestoreRestStore":
        return cls(
            project_id=settings.firestore_project_id,
            api_key=settings.firestore_api_key,
            collection=settings.collection,
            **kwargs,
        )

    @property
    def collection_url(self) -> str:
        return (
            f"{FIRESTORE_BASE_URL}/projects/{self.project_id}"
            f"/databases/(default)/documents/{self.collection}"
        )

    def exists(self, office_id: str) -> bool:
        return self._get_document(office_id) is not None

    def read(self, office_id: str) -> Optional[Dict[str, Any]]:
        document = self._get_document(office_id)
        if document is None:
            return None
        return decode_fields(document.get("fields", {}))

    def list_all(self) -> Iterator[str]:
        page_token = None
        while True:
            params: Dict[str, Any] = {"pageSize": self.page_size}
            if page_token:
                params["pageToken"] = page_token
            data = self._request(self.collection_url, params) or {}

            for document in data.get("documents", []):
                name = document.get("name", "")
                if name:
                    yield name.rsplit("/", 1)[-1]

            page_token = data.get("nextPageToken")
            if not page_token:
                break

    def _get_document(self, office_id: str) -> Optional[Dict[str, Any]]:
        return self._request(f"{self.collection_url}/{office_id}", {})

    def _request(self, url: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """GET a Firestore resource. Returns None on 404, retries transient failures."""
        if self.api_key:
            params = dict(params, key=self.api_key)

        last_error = None
        for attempt in range(1, self.retries + 1):
            try:
                response = self.session.get(url, params=params, timeout=self.timeout)
            except RequestException as e:
                last_error = f"network error: {e}"
                logger.info(f"Firestore network issue: {e}. Attempt {attempt}/{self.retries}")
                self._wait(attempt)
                continue

            status = response.status_code
            if status == 404:
                return None
            if status in TRANSIENT_STATUS_CODES:
                last_error = f"HTTP {status}"
                logger.info(f"Firestore transient error ({status}). Attempt {attempt}/{self.retries}")
                self._wait(attempt)
                continue
            if status >= 400:
                raise RecordStoreError(f"Firestore request failed ({status}) for {url}")
            return response.json()

        raise RecordStoreError(
            f"Firestore request failed after {self.retries} attempts for {url}: {last_error}"
        )

    def _wait(self, attempt: int) -> None:
        if attempt < self.retries and self.backoff > 0:
            time.sleep(min(30.0, self.backoff * attempt))
