"""Typed remote backend: exchanges bare tea varieties with the tea API."""

from typing import Final

import httpx
from pydantic import ValidationError as SchemaValidationError

from ...application.data_service import DataService, parse_tea_id, require_saved_id
from ...constants import DEFAULT_HTTP_TIMEOUT, TEAS_COLLECTION_PATH
from ...domain.entities import TeaVariety, validate_tea
from ...domain.exceptions import ArgumentError, TeaDataError, TransportError
from ...logging_config import get_logger
from .client import ApiEndpoint
from .schemas import TeaSchema, tea_list_adapter

logger: Final = get_logger(__name__)


class RestTeaService(DataService[TeaVariety]):
    """Tea data service talking to the tea API with bare entity bodies.

    Non-success responses raise TransportError carrying the status code;
    bodies that cannot be decoded raise TeaDataError.

    Args:
        transport: Optional httpx transport (e.g. ``httpx.MockTransport``)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        self._transport = transport
        self._timeout = timeout
        self._endpoint: ApiEndpoint | None = None

    @property
    def endpoint(self) -> ApiEndpoint:
        if self._endpoint is None:
            raise TeaDataError("REST tea service is not initialized")
        return self._endpoint

    async def initialize_async(self, locator: str) -> None:
        endpoint = ApiEndpoint(locator, transport=self._transport, timeout=self._timeout)

        if self._endpoint is not None:
            if self._endpoint.base_url == endpoint.base_url:
                return None
            raise ArgumentError(
                "locator", f"Already initialized against {self._endpoint.base_url}"
            )

        self._endpoint = endpoint
        logger.info("Tea API endpoint set", base_url=str(endpoint.base_url))
        return None

    async def _request(
        self, method: str, path: str, tea: TeaVariety | None = None
    ) -> httpx.Response:
        payload = TeaSchema.from_domain(tea).to_payload() if tea is not None else None
        response = await self.endpoint.send(method, path, payload)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Tea API request failed",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise TransportError(
                f"{method} {path} returned {response.status_code} "
                + f"{response.reason_phrase}",
                status_code=response.status_code,
            ) from exc
        return response

    @staticmethod
    def _decode_tea(response: httpx.Response) -> TeaVariety:
        try:
            return TeaSchema.model_validate_json(response.content).to_domain()
        except SchemaValidationError as exc:
            raise TeaDataError(f"Could not decode tea from tea API: {exc}") from exc

    async def find_all_async(self) -> list[TeaVariety]:
        response = await self._request("GET", TEAS_COLLECTION_PATH)
        try:
            schemas = tea_list_adapter.validate_json(response.content)
        except SchemaValidationError as exc:
            raise TeaDataError(f"Could not decode teas from tea API: {exc}") from exc
        return [schema.to_domain() for schema in schemas]

    async def find_by_id_async(self, tea_id: object) -> TeaVariety:
        key = parse_tea_id(tea_id)
        response = await self._request("GET", f"{TEAS_COLLECTION_PATH}/{key}")
        return self._decode_tea(response)

    async def add_async(self, tea: TeaVariety) -> TeaVariety:
        validate_tea(tea)
        response = await self._request("POST", TEAS_COLLECTION_PATH, tea)
        return self._decode_tea(response)

    async def update_async(self, tea: TeaVariety) -> TeaVariety:
        require_saved_id(tea)
        validate_tea(tea)
        # Full-collection path; the id travels in the body
        response = await self._request("PUT", TEAS_COLLECTION_PATH, tea)
        return self._decode_tea(response)

    async def delete_async(self, tea: TeaVariety) -> bool:
        key = require_saved_id(tea)
        validate_tea(tea)
        response = await self._request("DELETE", f"{TEAS_COLLECTION_PATH}/{key}")

        if not response.content:
            return True
        try:
            deleted = response.json()
        except ValueError as exc:
            raise TeaDataError(f"Could not decode delete result: {exc}") from exc
        if not isinstance(deleted, bool):
            raise TeaDataError(f"Unexpected delete result from tea API: {deleted!r}")
        return deleted
