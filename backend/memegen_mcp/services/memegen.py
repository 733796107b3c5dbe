"""
Memegen API Service.

This module handles all communication with the memegen.link API.

It is responsible for:
1. Listing templates (optionally filtered server-side)
2. Fetching a single template by id
3. Translating HTTP failures into service errors

Image URLs are built locally by the url_builder module and never fetched here.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from memegen_mcp.config import Settings, get_settings
from memegen_mcp.schemas.memegen import Template

# Configure logging
logger = logging.getLogger(__name__)

_TEMPLATE_LIST = TypeAdapter(list[Template])


class MemegenServiceError(Exception):
    """Base exception for memegen API errors ("failed to fetch")."""
    pass


class MemegenConnectionError(MemegenServiceError):
    """Raised when the memegen API cannot be reached."""
    pass


class MemegenResponseError(MemegenServiceError):
    """Raised when the memegen API returns an error status or a malformed body."""
    pass


class MemegenService:
    """
    Read-only client for the memegen.link template endpoints.

    Each call opens its own client and performs exactly one request.
    Nothing is cached or retried.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the memegen service.

        Args:
            settings: Optional settings instance. If not provided, uses default settings.
            transport: Optional httpx transport (tests inject a MockTransport here).
        """
        self.settings = settings or get_settings()
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self.settings.MEMEGEN_API_BASE.rstrip("/")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self._transport)

    async def _get(self, path: str, params: Optional[dict[str, str]] = None) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach memegen API at {self.base_url}{path}: {e!r}")
            raise MemegenConnectionError(
                f"Failed to connect to memegen API at {self.base_url}: {e!r}"
            ) from e

    async def fetch_templates(
        self,
        filter: Optional[str] = None,
        animated: Optional[bool] = None,
    ) -> list[Template]:
        """
        List templates.

        Args:
            filter: Server-side name filter, sent only when non-empty
            animated: Restrict to (non-)animated templates when given

        Returns:
            Templates in the order the API returned them

        Raises:
            MemegenConnectionError: If the API cannot be reached
            MemegenResponseError: On a non-2xx status or unparseable body
        """
        params: dict[str, str] = {}
        if filter:
            params["filter"] = filter
        if animated is not None:
            params["animated"] = "true" if animated else "false"

        logger.debug(f"Fetching templates with params {params}")
        response = await self._get("/templates", params=params)

        if not response.is_success:
            logger.error(
                f"Memegen API returned status {response.status_code} for template list: "
                f"{response.text[:500]}"
            )
            raise MemegenResponseError(
                f"Failed to fetch templates from memegen API: status {response.status_code}"
            )

        try:
            templates = _TEMPLATE_LIST.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Failed to parse memegen template list: {e}")
            raise MemegenResponseError(
                f"Failed to fetch templates from memegen API: {e}"
            ) from e

        logger.info(f"Fetched {len(templates)} templates from memegen API")
        return templates

    async def get_template(self, template_id: str) -> Optional[dict[str, Any]]:
        """
        Fetch one template document.

        The document is returned exactly as the API sent it, so callers see
        every field, in upstream order and with upstream types.

        Args:
            template_id: memegen template id

        Returns:
            The template document, or None if the API answers 404

        Raises:
            MemegenConnectionError: If the API cannot be reached
            MemegenResponseError: On any other non-2xx status, or a body that is not a JSON object
        """
        response = await self._get(f"/templates/{template_id}")

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info(f"Template '{template_id}' not found")
            return None

        if not response.is_success:
            logger.error(
                f"Memegen API returned status {response.status_code} for template "
                f"'{template_id}': {response.text[:500]}"
            )
            raise MemegenResponseError(
                f"Failed to get template info: status {response.status_code}"
            )

        try:
            document = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse memegen template '{template_id}': {e}")
            raise MemegenResponseError(f"Failed to get template info: {e}") from e

        if not isinstance(document, dict):
            logger.error(f"Memegen template '{template_id}' is not a JSON object: {response.text[:500]}")
            raise MemegenResponseError(
                f"Failed to get template info: expected a JSON object, got {type(document).__name__}"
            )

        return document
