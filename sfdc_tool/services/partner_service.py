"""Record-level operations against the partner API"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..api.exceptions import OperationFault
from ..constants import CRUD_CHUNK_SIZE, DEFAULT_QUERY_POLL_INTERVAL
from ..core.session import ApiEndpoint, SessionGateway
from ..transport.base import CallResult

logger = logging.getLogger(__name__)


def chunked(items: List[Any], size: int) -> Iterable[List[Any]]:
    """Split a list into consecutive chunks of at most ``size`` items"""
    for offset in range(0, len(items), size):
        yield items[offset:offset + size]


def clean_sobject(record: Any) -> Any:
    """Normalize a record returned by the server

    The server repeats the Id field, which decodes as a list; nested
    records are normalized recursively.
    """
    if not isinstance(record, dict):
        return record

    cleaned = dict(record)
    if isinstance(cleaned.get("Id"), list):
        cleaned["Id"] = cleaned["Id"][0]

    for key, value in cleaned.items():
        if isinstance(value, dict) and ("type" in value or "Id" in value):
            cleaned[key] = clean_sobject(value)

    return cleaned


class PartnerService:
    """Query and CRUD operations, chunked to the server's batch limits"""

    def __init__(self,
                 gateway: SessionGateway,
                 poll_interval: float = DEFAULT_QUERY_POLL_INTERVAL,
                 chunk_size: int = CRUD_CHUNK_SIZE,
                 sleep: Callable[[float], Any] = time.sleep):
        """Initialize partner service

        Args:
            gateway: Session gateway used for every call
            poll_interval: Seconds to wait between queryMore pages
            chunk_size: Records per create/update/delete/undelete call
            sleep: Sleep function (for testing)
        """
        self.gateway = gateway
        self.poll_interval = poll_interval
        self.chunk_size = chunk_size
        self._sleep = sleep

    def _call(self, operation: str, parameters) -> CallResult:
        return self.gateway.invoke(operation, parameters, api=ApiEndpoint.PARTNER)

    @staticmethod
    def _records(page: Dict[str, Any]) -> List[Dict[str, Any]]:
        records = page.get("records")
        if records is None:
            return []
        if not isinstance(records, list):
            records = [records]
        return [clean_sobject(record) for record in records]

    def _complete_query(self, page: Dict[str, Any]) -> List[Dict[str, Any]]:
        results = self._records(page)
        while str(page.get("done", "true")).lower() != "true":
            if self.poll_interval:
                self._sleep(self.poll_interval)
            locator = page.get("queryLocator")
            if not locator:
                raise OperationFault("queryMore", "missing queryLocator")
            page = self._call("queryMore", [("queryLocator", locator)]).result or {}
            results.extend(self._records(page))
        return results

    def query(self, query: str) -> List[Dict[str, Any]]:
        """Run a SOQL query, following queryMore until all records arrive"""
        logger.info("Executing SOQL query: %s", query)
        page = self._call("query", [("queryString", query)]).result or {}
        return self._complete_query(page)

    def query_all(self, query: str) -> List[Dict[str, Any]]:
        """Like query, but includes deleted and archived records"""
        logger.info("Executing SOQL queryAll: %s", query)
        page = self._call("queryAll", [("queryString", query)]).result or {}
        return self._complete_query(page)

    @staticmethod
    def _prepare_sobject(record: Dict[str, Any]) -> Dict[str, Any]:
        # type must lead the element list
        record = dict(record)
        sobject = {}
        if "type" in record:
            sobject["type"] = record.pop("type")
        sobject.update(record)
        return sobject

    def _save(self, operation: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        results = []
        for chunk in chunked(list(records), self.chunk_size):
            logger.info("%s %d record(s)", operation, len(chunk))
            call = self._call(
                operation,
                [("sObjects", self._prepare_sobject(record)) for record in chunk],
            )
            results.extend(call.results())
        return results

    def create(self, *records: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Create records; each needs a ``type`` key

        Returns:
            Save results such as ``[{"success": "true", "id": "..."}]``
        """
        return self._save("create", list(records))

    def update(self, *records: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Update records identified by ``Id``"""
        return self._save("update", list(records))

    def _by_ids(self, operation: str, ids: List[str]) -> List[Dict[str, Any]]:
        results = []
        for chunk in chunked(list(ids), self.chunk_size):
            logger.info("%s %d id(s)", operation, len(chunk))
            call = self._call(operation, [("ids", record_id) for record_id in chunk])
            results.extend(call.results())
        return results

    def delete(self, *ids: str) -> List[Dict[str, Any]]:
        """Delete records by id"""
        return self._by_ids("delete", list(ids))

    def undelete(self, *ids: str) -> List[Dict[str, Any]]:
        """Restore deleted records by id"""
        return self._by_ids("undelete", list(ids))

    def set_password(self, user_id: str, password: str) -> Optional[Dict[str, Any]]:
        """Set a user's password"""
        if not user_id or not password:
            raise ValueError("You must provide a user id and password")

        logger.info("Setting password for user %s", user_id)
        return self._call(
            "setPassword",
            [("userId", user_id), ("password", password)],
        ).result
