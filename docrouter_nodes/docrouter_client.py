"""
DocRouter REST API client for prompt management.
"""

from typing import Any

import httpx

from docrouter_nodes import logging
from docrouter_nodes.credentials import DocRouterCredentials
from docrouter_nodes.models import PromptConfig, PromptListParams

logger = logging.getLogger(__name__)


class DocRouterAPIError(Exception):
    """Raised when a DocRouter API call fails or returns a non-2xx response"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict) and payload.get("detail"):
        return str(payload["detail"])
    return str(payload)


class DocRouterClient:
    """Client for interacting with the DocRouter API"""

    def __init__(self, credentials: DocRouterCredentials, timeout: float = 30.0):
        """
        Initialize the DocRouter client.

        Args:
            credentials: Credentials used to authenticate every request
            timeout: Request timeout in seconds (default: 30.0)
        """
        self.credentials = credentials
        self.base_url = credentials.base_url
        self.timeout = timeout
        logger.info(f"DocRouter client initialized - Base URL: {self.base_url}")

    async def request(
        self,
        method: str,
        path: str,
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send an authenticated request to the DocRouter API.

        Args:
            method: HTTP method
            path: Path relative to the base URL (e.g. "/v0/orgs/{id}/prompts")
            query: Optional query string parameters
            body: Optional JSON body

        Returns:
            Decoded JSON response, or an empty dict for an empty body
        """
        try:
            logger.info(f"DocRouter request: {method} {path}")

            async with httpx.AsyncClient(base_url=self.base_url) as client:
                response = await client.request(
                    method,
                    path,
                    headers=self.credentials.auth_headers(),
                    params=query,
                    json=body,
                    timeout=self.timeout,
                )
                response.raise_for_status()

                if not response.content:
                    return {}
                try:
                    return response.json()
                except ValueError as e:
                    logger.error(f"Non-JSON response on {method} {path}: {response.status_code}")
                    raise DocRouterAPIError(
                        f"DocRouter API returned a non-JSON response ({response.status_code})",
                        status_code=response.status_code,
                    ) from e

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"HTTP error on {method} {path}: {status_code}")
            raise DocRouterAPIError(
                f"DocRouter API returned {status_code}: {_error_detail(e.response)}",
                status_code=status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Error calling DocRouter {method} {path}: {e}")
            raise DocRouterAPIError(f"DocRouter API request failed: {e}") from e

    async def test_credentials(self) -> Any:
        """Issue the credential type's test request"""
        test = self.credentials.test_request()
        return await self.request(test["method"], test["path"], query=test["query"])

    async def get_organization_id(self) -> str:
        """
        Resolve the organization the API token belongs to.

        Returns:
            The organization ID
        """
        token_info = await self.request(
            "GET",
            "/v0/account/token/organization",
            query={"token": self.credentials.api_token.get_secret_value()},
        )

        organization_id = token_info.get("organization_id") if isinstance(token_info, dict) else None
        if not organization_id:
            raise DocRouterAPIError(
                "Could not determine organization ID from token. "
                "Use an organization-level API token."
            )
        return organization_id

    async def list_prompts(self, organization_id: str, params: PromptListParams) -> Any:
        return await self.request(
            "GET",
            f"/v0/orgs/{organization_id}/prompts",
            query=params.to_query(),
        )

    async def get_prompt(self, organization_id: str, prompt_revid: str) -> Any:
        return await self.request("GET", f"/v0/orgs/{organization_id}/prompts/{prompt_revid}")

    async def create_prompt(self, organization_id: str, config: PromptConfig) -> Any:
        return await self.request(
            "POST",
            f"/v0/orgs/{organization_id}/prompts",
            body=config.to_body(),
        )

    async def update_prompt(
        self, organization_id: str, prompt_id: str, config: PromptConfig
    ) -> Any:
        return await self.request(
            "PUT",
            f"/v0/orgs/{organization_id}/prompts/{prompt_id}",
            body=config.to_body(),
        )

    async def delete_prompt(self, organization_id: str, prompt_id: str) -> dict:
        """Delete a prompt; DocRouter returns no useful body, so report success"""
        await self.request("DELETE", f"/v0/orgs/{organization_id}/prompts/{prompt_id}")
        return {"success": True, "promptId": prompt_id}

    async def list_prompt_versions(self, organization_id: str, prompt_id: str) -> Any:
        return await self.request(
            "GET", f"/v0/orgs/{organization_id}/prompts/{prompt_id}/versions"
        )
