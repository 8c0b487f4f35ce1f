"""
Unit tests for the field catalog clients.
"""

import base64

import httpx
import pytest

from cascading.catalog import AzureDevOpsFieldCatalog, StaticFieldCatalog, StaticProjectService
from cascading.exceptions import FieldCatalogError


FIELDS_PAYLOAD = {
    "count": 2,
    "value": [
        {"referenceName": "System.State", "name": "State", "type": "string", "url": "https://x/state"},
        {"referenceName": "Microsoft.VSTS.Common.Priority", "name": "Priority", "type": "integer"},
    ],
}


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_static_project_service_returns_project():
    project = await StaticProjectService("abc", "Fabrikam").get_project()
    assert project.id == "abc"
    assert project.name == "Fabrikam"


@pytest.mark.asyncio
async def test_static_catalog_returns_reference_names():
    fields = await StaticFieldCatalog(["A", "B"]).get_fields("any")
    assert [field.reference_name for field in fields] == ["A", "B"]


@pytest.mark.asyncio
async def test_azure_devops_catalog_requests_fields_endpoint():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=FIELDS_PAYLOAD)

    async with _client(handler) as client:
        catalog = AzureDevOpsFieldCatalog(
            "https://dev.azure.com/fabrikam/",
            personal_access_token="secret",
            api_version="7.1",
            client=client,
        )
        fields = await catalog.get_fields("project-1")

    assert seen["url"] == "https://dev.azure.com/fabrikam/project-1/_apis/wit/fields?api-version=7.1"
    expected = base64.b64encode(b":secret").decode()
    assert seen["auth"] == f"Basic {expected}"
    assert [field.reference_name for field in fields] == ["System.State", "Microsoft.VSTS.Common.Priority"]
    assert fields[1].name == "Priority"


@pytest.mark.asyncio
async def test_azure_devops_catalog_without_token_sends_no_auth():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=FIELDS_PAYLOAD)

    async with _client(handler) as client:
        await AzureDevOpsFieldCatalog("https://dev.azure.com/fabrikam", client=client).get_fields("p")

    assert seen["auth"] is None


@pytest.mark.asyncio
async def test_azure_devops_catalog_http_error_raises_field_catalog_error():
    async with _client(lambda request: httpx.Response(401, json={"message": "nope"})) as client:
        catalog = AzureDevOpsFieldCatalog("https://dev.azure.com/fabrikam", client=client)
        with pytest.raises(FieldCatalogError):
            await catalog.get_fields("p")


@pytest.mark.asyncio
async def test_azure_devops_catalog_transport_error_raises_field_catalog_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        catalog = AzureDevOpsFieldCatalog("https://dev.azure.com/fabrikam", client=client)
        with pytest.raises(FieldCatalogError):
            await catalog.get_fields("p")


@pytest.mark.asyncio
async def test_azure_devops_catalog_unexpected_payload_raises():
    async with _client(lambda request: httpx.Response(200, json={"fields": []})) as client:
        catalog = AzureDevOpsFieldCatalog("https://dev.azure.com/fabrikam", client=client)
        with pytest.raises(FieldCatalogError):
            await catalog.get_fields("p")


@pytest.mark.asyncio
async def test_azure_devops_catalog_non_json_raises():
    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        catalog = AzureDevOpsFieldCatalog("https://dev.azure.com/fabrikam", client=client)
        with pytest.raises(FieldCatalogError):
            await catalog.get_fields("p")


def test_azure_devops_catalog_requires_organization_url():
    with pytest.raises(ValueError):
        AzureDevOpsFieldCatalog("")
