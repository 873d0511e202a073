import json

import httpx
import pytest

from docrouter_nodes.docrouter_client import DocRouterAPIError, DocRouterClient
from docrouter_nodes.models import PromptConfig, PromptListParams

from tests.conftest import BASE_PATH, ORG_ID, TOKEN

PROMPTS_PATH = f"{BASE_PATH}/v0/orgs/{ORG_ID}/prompts"


@pytest.mark.asyncio
async def test_get_organization_id(org_credentials, token_route):
    client = DocRouterClient(org_credentials)

    assert await client.get_organization_id() == ORG_ID

    request = token_route.calls.last.request
    assert request.url.host == "app.docrouter.ai"
    assert request.url.params["token"] == TOKEN
    assert request.headers["Authorization"] == f"Bearer {TOKEN}"


@pytest.mark.asyncio
async def test_get_organization_id_requires_org_token(org_credentials, respx_mock):
    respx_mock.get(path=f"{BASE_PATH}/v0/account/token/organization").mock(
        return_value=httpx.Response(200, json={"account_id": "acc-1"})
    )
    client = DocRouterClient(org_credentials)

    with pytest.raises(DocRouterAPIError, match="organization-level API token"):
        await client.get_organization_id()


@pytest.mark.asyncio
async def test_list_prompts_sends_filters(org_credentials, respx_mock):
    route = respx_mock.get(path=PROMPTS_PATH).mock(
        return_value=httpx.Response(200, json={"prompts": [], "total_count": 0})
    )
    client = DocRouterClient(org_credentials)

    response = await client.list_prompts(
        ORG_ID, PromptListParams(limit=5, skip=10, name_search="invoice")
    )

    assert response == {"prompts": [], "total_count": 0}
    params = route.calls.last.request.url.params
    assert dict(params) == {"limit": "5", "skip": "10", "name_search": "invoice"}


@pytest.mark.asyncio
async def test_create_prompt_posts_body(org_credentials, respx_mock):
    route = respx_mock.post(path=PROMPTS_PATH).mock(
        return_value=httpx.Response(200, json={"prompt_id": "p1", "prompt_revid": "r1"})
    )
    client = DocRouterClient(org_credentials)
    config = PromptConfig(name="Invoice", content="Extract totals", tag_ids="t1,t2")

    response = await client.create_prompt(ORG_ID, config)

    assert response["prompt_id"] == "p1"
    assert json.loads(route.calls.last.request.content) == {
        "name": "Invoice",
        "content": "Extract totals",
        "model": "gpt-4o-mini",
        "tag_ids": ["t1", "t2"],
    }


@pytest.mark.asyncio
async def test_update_prompt_puts_body(org_credentials, respx_mock):
    route = respx_mock.put(path=f"{PROMPTS_PATH}/p1").mock(
        return_value=httpx.Response(200, json={"prompt_id": "p1", "prompt_version": 2})
    )
    client = DocRouterClient(org_credentials)

    response = await client.update_prompt(ORG_ID, "p1", PromptConfig(name="n", content="c"))

    assert response["prompt_version"] == 2
    assert route.calls.last.request.method == "PUT"


@pytest.mark.asyncio
async def test_delete_prompt_reports_success(org_credentials, respx_mock):
    respx_mock.delete(path=f"{PROMPTS_PATH}/p1").mock(return_value=httpx.Response(204))
    client = DocRouterClient(org_credentials)

    assert await client.delete_prompt(ORG_ID, "p1") == {"success": True, "promptId": "p1"}


@pytest.mark.asyncio
async def test_get_prompt_and_versions(org_credentials, respx_mock):
    respx_mock.get(path=f"{PROMPTS_PATH}/r1").mock(
        return_value=httpx.Response(200, json={"prompt_revid": "r1"})
    )
    respx_mock.get(path=f"{PROMPTS_PATH}/p1/versions").mock(
        return_value=httpx.Response(200, json={"prompts": [{"prompt_version": 1}]})
    )
    client = DocRouterClient(org_credentials)

    assert await client.get_prompt(ORG_ID, "r1") == {"prompt_revid": "r1"}
    assert await client.list_prompt_versions(ORG_ID, "p1") == {"prompts": [{"prompt_version": 1}]}


@pytest.mark.asyncio
async def test_non_2xx_raises_api_error(org_credentials, respx_mock):
    respx_mock.get(path=f"{PROMPTS_PATH}/missing").mock(
        return_value=httpx.Response(404, json={"detail": "Prompt not found"})
    )
    client = DocRouterClient(org_credentials)

    with pytest.raises(DocRouterAPIError) as exc_info:
        await client.get_prompt(ORG_ID, "missing")

    assert exc_info.value.status_code == 404
    assert "Prompt not found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transport_error_raises_api_error(org_credentials, respx_mock):
    respx_mock.get(path=PROMPTS_PATH).mock(side_effect=httpx.ConnectError("connection refused"))
    client = DocRouterClient(org_credentials)

    with pytest.raises(DocRouterAPIError) as exc_info:
        await client.list_prompts(ORG_ID, PromptListParams())

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_account_credentials_test_request(account_credentials, respx_mock):
    route = respx_mock.get(path=f"{BASE_PATH}/v0/account/llm/models").mock(
        return_value=httpx.Response(200, json={"models": ["gpt-4o-mini"]})
    )
    client = DocRouterClient(account_credentials)

    assert await client.test_credentials() == {"models": ["gpt-4o-mini"]}
    assert route.calls.last.request.headers["Authorization"] == "Bearer account-token"
    assert not route.calls.last.request.url.params


@pytest.mark.asyncio
async def test_org_credentials_test_request(org_credentials, token_route):
    client = DocRouterClient(org_credentials)

    assert await client.test_credentials() == {"organization_id": ORG_ID}
    assert token_route.calls.last.request.url.params["token"] == TOKEN


@pytest.mark.asyncio
async def test_non_json_success_raises_api_error(org_credentials, respx_mock):
    respx_mock.get(path=f"{PROMPTS_PATH}/r1").mock(
        return_value=httpx.Response(200, text="<html>gateway</html>")
    )
    client = DocRouterClient(org_credentials)

    with pytest.raises(DocRouterAPIError, match="non-JSON") as exc_info:
        await client.get_prompt(ORG_ID, "r1")

    assert exc_info.value.status_code == 200
