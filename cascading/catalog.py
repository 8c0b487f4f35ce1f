"""
Field Catalog

Single Responsibility: Know which field reference names exist in a project.

- ProjectService: which project the form belongs to
- FieldCatalogService: the fields defined for a project
- AzureDevOpsFieldCatalog: work item tracking REST API client (httpx)

This module does NOT validate cascade configurations (see validation.py).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import FieldCatalogError

logger = structlog.get_logger(__name__)


class ProjectInfo(BaseModel):
    """Identity of the project hosting the work item."""

    id: str = Field(..., description="Project identifier used for API calls")
    name: str = Field(default="", description="Human-readable project name")


class WorkItemField(BaseModel):
    """
    A field defined in the project's work item schema.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    reference_name: str = Field(..., alias="referenceName", description="e.g. 'Microsoft.VSTS.Common.Priority'")
    name: str = Field(default="", description="Display name")
    type: Optional[str] = Field(default=None, description="Field data type")
    url: Optional[str] = Field(default=None, description="REST resource URL")


class ProjectService(ABC):
    """Abstract interface returning the current project."""

    @abstractmethod
    async def get_project(self) -> ProjectInfo:
        ...


class StaticProjectService(ProjectService):
    """Project known up front (e.g. from settings)."""

    def __init__(self, project_id: str, name: str = ""):
        self._project = ProjectInfo(id=project_id, name=name or project_id)

    async def get_project(self) -> ProjectInfo:
        return self._project


class FieldCatalogService(ABC):
    """Abstract interface returning the fields defined for a project."""

    @abstractmethod
    async def get_fields(self, project_id: str) -> List[WorkItemField]:
        ...


class StaticFieldCatalog(FieldCatalogService):
    """Catalog built from a fixed list of reference names."""

    def __init__(self, reference_names: Iterable[str]):
        self._fields = [WorkItemField(reference_name=name, name=name) for name in reference_names]

    async def get_fields(self, project_id: str) -> List[WorkItemField]:
        return list(self._fields)


class AzureDevOpsFieldCatalog(FieldCatalogService):
    """
    Reads the field catalog from the Azure DevOps work item tracking API:

        GET {organization_url}/{project}/_apis/wit/fields?api-version={api_version}

    Authenticates with a personal access token (basic auth, empty user name).
    An httpx.AsyncClient may be injected; otherwise one is created per call.
    """

    def __init__(
        self,
        organization_url: str,
        personal_access_token: str = "",
        api_version: str = "7.1",
        timeout_seconds: float = 30,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not organization_url:
            raise ValueError("organization_url is required")
        self._organization_url = organization_url.rstrip("/")
        self._personal_access_token = personal_access_token
        self._api_version = api_version
        self._timeout_seconds = timeout_seconds
        self._client = client

    def _fields_url(self, project_id: str) -> str:
        return f"{self._organization_url}/{project_id}/_apis/wit/fields"

    def _auth(self) -> Optional[httpx.BasicAuth]:
        if not self._personal_access_token:
            return None
        return httpx.BasicAuth("", self._personal_access_token)

    def _parse_fields(self, payload: Any) -> List[WorkItemField]:
        if not isinstance(payload, dict) or not isinstance(payload.get("value"), list):
            raise FieldCatalogError("Unexpected field catalog payload: missing 'value' list")
        try:
            return [WorkItemField.model_validate(item) for item in payload["value"]]
        except ValidationError as e:
            raise FieldCatalogError(f"Invalid field in catalog payload: {e}") from e

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        return await client.get(
            url,
            params={"api-version": self._api_version},
            auth=self._auth(),
            headers={"Accept": "application/json"},
            timeout=self._timeout_seconds,
        )

    async def get_fields(self, project_id: str) -> List[WorkItemField]:
        """
        Fetch every field defined for a project.

        Raises:
            FieldCatalogError: On transport errors, non-2xx responses or bad payloads
        """
        url = self._fields_url(project_id)
        logger.debug("Fetching field catalog", url=url, project_id=project_id)

        try:
            if self._client is not None:
                response = await self._get(self._client, url)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._get(client, url)
            response.raise_for_status()
            payload: Dict[str, Any] = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Field catalog request failed",
                status=e.response.status_code,
                project_id=project_id,
            )
            raise FieldCatalogError(
                f"Field catalog request failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Field catalog request error", error=str(e), project_id=project_id)
            raise FieldCatalogError(f"Field catalog request error: {e}") from e
        except ValueError as e:
            raise FieldCatalogError(f"Field catalog response is not JSON: {e}") from e

        fields = self._parse_fields(payload)
        logger.info("Field catalog fetched", project_id=project_id, count=len(fields))
        return fields
