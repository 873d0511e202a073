"""
DocRouter credential types.

Both credential types carry an API token and a base URL and authenticate with a
bearer token. They differ in the request used to test them.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, SecretStr, field_validator

from docrouter_nodes.config import DEFAULT_BASE_URL


class DocRouterCredentials(BaseModel, ABC):
    """Common fields of the DocRouter credential types"""

    model_config = ConfigDict(frozen=True)

    name: ClassVar[str]
    display_name: ClassVar[str]

    api_token: SecretStr
    base_url: str = DEFAULT_BASE_URL

    @field_validator("base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: Any) -> str:
        # Blank base URLs fall back to DocRouter cloud
        if value is None or not str(value).strip():
            return DEFAULT_BASE_URL
        return str(value).strip().rstrip("/")

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token.get_secret_value()}"}

    @abstractmethod
    def test_request(self) -> dict[str, Any]:
        """Return the method, path and query used to check the credentials"""


class DocRouterOrgApi(DocRouterCredentials):
    """Organization-level API token"""

    name: ClassVar[str] = "docRouterOrgApi"
    display_name: ClassVar[str] = "DocRouter Organization API"

    def test_request(self) -> dict[str, Any]:
        return {
            "method": "GET",
            "path": "/v0/account/token/organization",
            "query": {"token": self.api_token.get_secret_value()},
        }


class DocRouterAccountApi(DocRouterCredentials):
    """Account-level API token, used for admin operations"""

    name: ClassVar[str] = "docRouterAccountApi"
    display_name: ClassVar[str] = "DocRouter Account API"

    def test_request(self) -> dict[str, Any]:
        return {
            "method": "GET",
            "path": "/v0/account/llm/models",
            "query": None,
        }
