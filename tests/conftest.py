import hashlib
import hmac

import httpx
import pytest

from docrouter_nodes.credentials import DocRouterAccountApi, DocRouterOrgApi

BASE_PATH = "/fastapi"
ORG_ID = "org-123"
TOKEN = "org-token"


def sign(secret: str, timestamp: str, body: bytes) -> str:
    """Build an X-DocRouter-Signature header the way DocRouter does"""
    message = f"{timestamp}.".encode("utf-8") + body
    return "sha256=" + hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


@pytest.fixture
def org_credentials() -> DocRouterOrgApi:
    return DocRouterOrgApi(api_token=TOKEN)


@pytest.fixture
def account_credentials() -> DocRouterAccountApi:
    return DocRouterAccountApi(api_token="account-token")


@pytest.fixture
def token_route(respx_mock):
    """Token lookup that resolves the organization ID"""
    return respx_mock.get(path=f"{BASE_PATH}/v0/account/token/organization").mock(
        return_value=httpx.Response(200, json={"organization_id": ORG_ID})
    )
