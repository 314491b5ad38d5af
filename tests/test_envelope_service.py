"""Tests for the enveloped REST tea data service.

Every outcome is reported through a ResultEnvelope; nothing here may raise.
"""

import json
from datetime import timedelta

import httpx
import pytest

from conftest import TEA_API_URL, FakeTeaApi
from teadata.domain.entities import TeaVariety
from teadata.domain.envelope import ResultEnvelope
from teadata.infrastructure.http.envelope_service import EnvelopeTeaService


def _service(handler) -> EnvelopeTeaService:
    service = EnvelopeTeaService(transport=httpx.MockTransport(handler))
    result = service.initialize(TEA_API_URL)
    assert result.success
    return service


def test_find_all_returns_single_envelope(envelope_api: FakeTeaApi):
    """Test listing through the enveloped API.

    Covers:
    - One envelope per call, holding every tea
    - Steep times are decoded from hh:mm:ss
    """
    service = _service(envelope_api)

    [envelope] = service.find_all()

    assert envelope.success
    assert envelope.teas == [TeaVariety("Earl Grey", timedelta(minutes=2), 212, id=1)]


def test_find_by_id_reports_server_message(envelope_api: FakeTeaApi):
    service = _service(envelope_api)

    envelope = service.find_by_id(99)

    assert envelope.success is False
    assert envelope.message == "Tea 99 not found"
    assert envelope.teas == []


def test_find_by_id_with_invalid_id_sends_nothing(envelope_api: FakeTeaApi):
    service = _service(envelope_api)

    envelope = service.find_by_id("abc")

    assert envelope.success is False
    assert "id" in envelope.message
    assert envelope_api.requests == []


def test_add_returns_created_tea(envelope_api: FakeTeaApi):
    service = _service(envelope_api)

    envelope = service.add(TeaVariety(" Oolong ", "00:03:00", 195))

    assert envelope.success
    assert envelope.teas == [TeaVariety("Oolong", timedelta(minutes=3), 195, id=2)]
    assert json.loads(envelope_api.requests[-1].content)["name"] == "Oolong"


def test_add_invalid_tea_is_reported_before_sending(envelope_api: FakeTeaApi):
    service = _service(envelope_api)

    envelope = service.add(TeaVariety("   "))

    assert envelope.success is False
    assert "name" in envelope.message
    assert envelope_api.requests == []


def test_update_puts_to_item_path(envelope_api: FakeTeaApi):
    service = _service(envelope_api)
    tea = TeaVariety("Earl Grey", "00:04:00", 205, id=1)

    envelope = service.update(tea)

    assert envelope.success
    assert envelope.teas[0].steep_time == timedelta(minutes=4)
    assert envelope_api.requests[-1].method == "PUT"
    assert envelope_api.requests[-1].url.path == "/api/teas/1"


def test_update_unsaved_tea_is_reported(envelope_api: FakeTeaApi):
    service = _service(envelope_api)

    envelope = service.update(TeaVariety("Oolong"))

    assert envelope.success is False
    assert envelope_api.requests == []


def test_delete_uses_item_path(envelope_api: FakeTeaApi):
    service = _service(envelope_api)

    envelope = service.delete(TeaVariety("Earl Grey", id=1))

    assert envelope.success
    assert envelope_api.requests[-1].method == "DELETE"
    assert envelope_api.requests[-1].url.path == "/api/teas/1"
    assert envelope_api.teas == {}


def test_operations_before_initialize_are_reported():
    envelope = EnvelopeTeaService().find_by_id(1)

    assert envelope.success is False
    assert "not initialized" in envelope.message


@pytest.mark.parametrize("locator", ["", "not a url", "ftp://tea.test/"])
def test_initialize_reports_bad_locator(locator):
    envelope = EnvelopeTeaService().initialize(locator)

    assert isinstance(envelope, ResultEnvelope)
    assert envelope.success is False
    assert envelope.message.startswith("Could not initialize")


def test_reinitialize_with_other_locator_is_reported(envelope_api: FakeTeaApi):
    service = _service(envelope_api)

    assert service.initialize(TEA_API_URL).success
    assert service.initialize("http://other.test/").success is False


def test_connection_failure_is_reported():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    service = _service(refuse)

    [envelope] = service.find_all()

    assert envelope.success is False
    assert "Connection refused" in envelope.message


def test_non_envelope_error_body_is_reported_with_status():
    service = _service(lambda request: httpx.Response(502, text="Bad gateway"))

    envelope = service.find_by_id(1)

    assert envelope.success is False
    assert "502" in envelope.message


def test_undecodable_success_body_is_reported():
    service = _service(lambda request: httpx.Response(200, text="<html></html>"))

    [envelope] = service.find_all()

    assert envelope.success is False
    assert "decode" in envelope.message


def test_error_status_overrides_claimed_success():
    service = _service(
        lambda request: httpx.Response(
            500, json={"success": True, "message": None, "teas": None}
        )
    )

    envelope = service.find_by_id(1)

    assert envelope.success is False
    assert "500" in envelope.message
    assert envelope.teas == []


@pytest.mark.asyncio
async def test_async_operations(envelope_api: FakeTeaApi):
    service = EnvelopeTeaService(transport=httpx.MockTransport(envelope_api))
    assert (await service.initialize_async(TEA_API_URL)).success

    added = await service.add_async(TeaVariety("Sencha", "00:01:00", 175))
    [tea] = added.teas

    found = await service.find_by_id_async(tea.id)
    assert found.teas == [tea]

    deleted = await service.delete_async(tea)
    assert deleted.success
