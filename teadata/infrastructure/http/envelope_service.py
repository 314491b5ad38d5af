"""Enveloped remote backend: reports every outcome as a ResultEnvelope."""

from typing import Final

import httpx
from pydantic import ValidationError as SchemaValidationError

from ...application.data_service import DataService, parse_tea_id, require_saved_id
from ...constants import DEFAULT_HTTP_TIMEOUT, TEAS_COLLECTION_PATH
from ...domain.entities import TeaVariety, validate_tea
from ...domain.envelope import ResultEnvelope
from ...domain.exceptions import ArgumentError, TeaDataError
from ...logging_config import get_logger
from .client import ApiEndpoint
from .schemas import EnvelopeSchema, TeaSchema

logger: Final = get_logger(__name__)


class EnvelopeTeaService(DataService[ResultEnvelope]):
    """Tea data service for the enveloped tea API.

    Never raises: every failure, including an unusable locator and a tea that
    fails validation (reported before any request is sent), comes back as an
    envelope with ``success=False`` and a descriptive message. Callers must
    check ``success``.

    ``find_all`` returns a one-element list holding the envelope with all teas.

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
            raise TeaDataError("Enveloped tea service is not initialized")
        return self._endpoint

    @staticmethod
    def _report(operation: str, error: Exception) -> ResultEnvelope:
        logger.warning(
            "Tea API call reported as failure",
            operation=operation,
            error_type=type(error).__name__,
            error_message=str(error),
        )
        return ResultEnvelope.failure(f"Could not {operation}: {error}")

    async def _exchange(
        self, method: str, path: str, tea: TeaVariety | None = None
    ) -> ResultEnvelope:
        payload = TeaSchema.from_domain(tea).to_payload() if tea is not None else None
        response = await self.endpoint.send(method, path, payload)

        try:
            envelope = EnvelopeSchema.model_validate_json(response.content).to_domain()
        except SchemaValidationError as exc:
            if not response.is_success:
                return ResultEnvelope.failure(
                    f"{method} {path} returned {response.status_code} "
                    + f"{response.reason_phrase}"
                )
            raise TeaDataError(f"Could not decode tea API envelope: {exc}") from exc

        if not response.is_success and envelope.success:
            return ResultEnvelope(
                success=False,
                message=envelope.message
                or f"{method} {path} returned {response.status_code}",
                teas=envelope.teas,
            )
        return envelope

    async def initialize_async(self, locator: str) -> ResultEnvelope:
        try:
            endpoint = ApiEndpoint(
                locator, transport=self._transport, timeout=self._timeout
            )
            if self._endpoint is not None:
                if self._endpoint.base_url == endpoint.base_url:
                    return ResultEnvelope.ok(message="Already initialized")
                raise ArgumentError(
                    "locator", f"Already initialized against {self._endpoint.base_url}"
                )
        except Exception as exc:
            return self._report("initialize", exc)

        self._endpoint = endpoint
        logger.info("Tea API endpoint set", base_url=str(endpoint.base_url))
        return ResultEnvelope.ok(message=f"Using tea API at {endpoint.base_url}")

    async def find_all_async(self) -> list[ResultEnvelope]:
        try:
            envelope = await self._exchange("GET", TEAS_COLLECTION_PATH)
        except Exception as exc:
            envelope = self._report("list teas", exc)
        return [envelope]

    async def find_by_id_async(self, tea_id: object) -> ResultEnvelope:
        try:
            key = parse_tea_id(tea_id)
            return await self._exchange("GET", f"{TEAS_COLLECTION_PATH}/{key}")
        except Exception as exc:
            return self._report("find tea", exc)

    async def add_async(self, tea: TeaVariety) -> ResultEnvelope:
        try:
            validate_tea(tea)
            return await self._exchange("POST", TEAS_COLLECTION_PATH, tea)
        except Exception as exc:
            return self._report("add tea", exc)

    async def update_async(self, tea: TeaVariety) -> ResultEnvelope:
        try:
            key = require_saved_id(tea)
            validate_tea(tea)
            return await self._exchange("PUT", f"{TEAS_COLLECTION_PATH}/{key}", tea)
        except Exception as exc:
            return self._report("update tea", exc)

    async def delete_async(self, tea: TeaVariety) -> ResultEnvelope:
        try:
            key = require_saved_id(tea)
            validate_tea(tea)
            return await self._exchange("DELETE", f"{TEAS_COLLECTION_PATH}/{key}")
        except Exception as exc:
            return self._report("delete tea", exc)
