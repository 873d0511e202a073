import json
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from docrouter_nodes import logging
from docrouter_nodes.config import (
    DOCROUTER_ACCOUNT_API_TOKEN,
    DOCROUTER_BASE_URL,
    DOCROUTER_ORG_API_TOKEN,
    DOCROUTER_VERIFY_SIGNATURE,
    DOCROUTER_WEBHOOK_PATH,
    DOCROUTER_WEBHOOK_SECRET,
    parse_bool,
)
from docrouter_nodes.credentials import DocRouterAccountApi, DocRouterOrgApi
from docrouter_nodes.docrouter_client import DocRouterAPIError, DocRouterClient
from docrouter_nodes.prompt_node import DocRouterPromptNode, NodeOperationError
from docrouter_nodes.security import WebhookVerificationError
from docrouter_nodes.webhook_node import DocRouterWebhookNode

app = FastAPI(title="DocRouter Workflow Nodes")


logger = logging.getLogger(__name__)


class PromptRequest(BaseModel):
    """Input items for a Prompt node run"""

    items: list[dict[str, Any]] = []
    continue_on_fail: bool = False


def get_webhook_node() -> DocRouterWebhookNode:
    """Build the webhook trigger node from configuration"""
    return DocRouterWebhookNode(
        path=DOCROUTER_WEBHOOK_PATH,
        verify_signature=parse_bool(DOCROUTER_VERIFY_SIGNATURE, default=True),
        webhook_secret=DOCROUTER_WEBHOOK_SECRET,
    )


def get_org_credentials() -> DocRouterOrgApi:
    """Build organization credentials from configuration"""
    if not DOCROUTER_ORG_API_TOKEN:
        raise HTTPException(status_code=500, detail="DOCROUTER_ORG_API_TOKEN is not set")
    return DocRouterOrgApi(api_token=DOCROUTER_ORG_API_TOKEN, base_url=DOCROUTER_BASE_URL)


def get_account_credentials() -> DocRouterAccountApi:
    """Build account credentials from configuration"""
    if not DOCROUTER_ACCOUNT_API_TOKEN:
        raise HTTPException(status_code=500, detail="DOCROUTER_ACCOUNT_API_TOKEN is not set")
    return DocRouterAccountApi(
        api_token=DOCROUTER_ACCOUNT_API_TOKEN, base_url=DOCROUTER_BASE_URL
    )


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "service": "DocRouter Workflow Nodes",
        "status": "running",
        "version": "0.1.0",
        "endpoints": {
            "webhook": "POST /webhook/{path}",
            "prompts": "POST /prompts/{operation}",
            "credential_test": "GET /credentials/{org|account}/test",
            "health": "GET /health",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "DocRouter Workflow Nodes",
    }


@app.post("/webhook/{path:path}")
async def handle_post_webhook(
    path: str,
    request: Request,
    node: DocRouterWebhookNode = Depends(get_webhook_node),
):
    """
    Webhook endpoint for DocRouter events.
    Verifies the request signature and relays the payload to the workflow.
    """
    if path.strip("/") != node.path:
        raise HTTPException(status_code=404, detail="Unknown webhook path")

    # Get raw body for signature verification
    raw_body = await request.body()

    try:
        body = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Failed to parse webhook payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Webhook payload must be a JSON object")

    try:
        items = node.handle(
            raw_body=raw_body,
            body=body,
            headers=request.headers,
            query=request.query_params,
            params=request.path_params,
            now=time.time(),
        )
    except WebhookVerificationError as e:
        logger.warning(f"Webhook rejected: {e}")
        raise HTTPException(status_code=401, detail=str(e))

    logger.info(f"Received DocRouter event: {body.get('event', 'unknown')}")
    return JSONResponse(content={"status": "ok", "items": items}, status_code=200)


@app.post("/prompts/{operation}")
async def handle_prompt_operation(
    operation: str,
    prompt_request: PromptRequest,
    credentials: DocRouterOrgApi = Depends(get_org_credentials),
):
    """Run a Prompt node operation over the submitted items"""
    node = DocRouterPromptNode(credentials, continue_on_fail=prompt_request.continue_on_fail)

    try:
        results = await node.execute(operation, prompt_request.items)
    except NodeOperationError as e:
        logger.error(f"Prompt operation '{operation}' failed: {e}")
        if isinstance(e.__cause__, DocRouterAPIError):
            raise HTTPException(status_code=502, detail=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except DocRouterAPIError as e:
        logger.error(f"DocRouter API error: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"items": [result.model_dump(by_alias=True) for result in results]}


@app.get("/credentials/org/test")
async def check_org_credentials(credentials: DocRouterOrgApi = Depends(get_org_credentials)):
    """Check the organization token against DocRouter"""
    return await _check_credentials(credentials)


@app.get("/credentials/account/test")
async def check_account_credentials(
    credentials: DocRouterAccountApi = Depends(get_account_credentials),
):
    """Check the account token against DocRouter"""
    return await _check_credentials(credentials)


async def _check_credentials(credentials: DocRouterOrgApi | DocRouterAccountApi) -> dict:
    try:
        await DocRouterClient(credentials).test_credentials()
    except DocRouterAPIError as e:
        logger.warning(f"{credentials.display_name} credential test failed: {e}")
        return {"status": "error", "credential": credentials.name, "message": str(e)}

    logger.info(f"{credentials.display_name} credential test succeeded")
    return {"status": "ok", "credential": credentials.name}
