"""
DocRouter Prompt node: list, get, create, update and delete prompts.
"""

from enum import Enum
from typing import Any

from pydantic import ValidationError

from docrouter_nodes import logging
from docrouter_nodes.credentials import DocRouterOrgApi
from docrouter_nodes.docrouter_client import DocRouterAPIError, DocRouterClient
from docrouter_nodes.models import NodeItem, PromptConfig, PromptListParams

logger = logging.getLogger(__name__)

CUSTOM_API_CALL = "__CUSTOM_API_CALL__"


class NodeOperationError(Exception):
    """Raised when a node operation cannot be carried out"""

    def __init__(self, message: str, item_index: int | None = None):
        super().__init__(message)
        self.item_index = item_index


class PromptOperation(str, Enum):
    """Operations supported by the Prompt node"""

    LIST = "list"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LIST_VERSIONS = "listVersions"


# Run once with the first item's parameters rather than once per item
SINGLE_SHOT_OPERATIONS = {PromptOperation.LIST, PromptOperation.LIST_VERSIONS}


def _required(params: dict[str, Any], name: str) -> str:
    value = params.get(name)
    if value is None or not str(value).strip():
        raise NodeOperationError(f"Missing required parameter: {name}")
    return str(value).strip()


def _error_message(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in error.errors()
        )
    return str(error)


class DocRouterPromptNode:
    """Workflow node managing prompts of a DocRouter organization"""

    def __init__(self, credentials: DocRouterOrgApi, continue_on_fail: bool = False):
        """
        Initialize the Prompt node.

        Args:
            credentials: Organization-level DocRouter credentials
            continue_on_fail: Record per-item errors instead of aborting the run
        """
        self.client = DocRouterClient(credentials)
        self.continue_on_fail = continue_on_fail

    @staticmethod
    def resolve_operation(operation: str) -> PromptOperation:
        if operation == CUSTOM_API_CALL:
            raise NodeOperationError(
                "For custom API calls, use a generic HTTP request with the "
                "DocRouter Organization API credentials. This node only supports "
                "List, Get, Create, Update, Delete, and List Versions."
            )
        try:
            return PromptOperation(operation)
        except ValueError:
            raise NodeOperationError(f"Unknown operation: {operation}")

    async def execute(self, operation: str, items: list[dict[str, Any]]) -> list[NodeItem]:
        """
        Run an operation over the input items.

        Args:
            operation: One of the PromptOperation values
            items: Parameters for each input item

        Returns:
            One output record per processed item
        """
        if not items:
            items = [{}]

        organization_id = await self.client.get_organization_id()

        try:
            op = self.resolve_operation(operation)
        except NodeOperationError as e:
            if not self.continue_on_fail:
                e.item_index = 0
                raise
            logger.warning(f"Operation '{operation}' rejected for {len(items)} item(s): {e}")
            return [
                NodeItem(json={"error": str(e)}, paired_item=item_index, error=str(e))
                for item_index in range(len(items))
            ]

        logger.info(
            f"Executing prompt operation '{op.value}' for {len(items)} item(s) "
            f"in organization {organization_id}"
        )

        if op in SINGLE_SHOT_OPERATIONS:
            indexes = [0]
        else:
            indexes = list(range(len(items)))

        results: list[NodeItem] = []
        for item_index in indexes:
            try:
                response = await self._run(op, organization_id, items[item_index])
                results.append(NodeItem(json=response or {}, paired_item=item_index))
            except (DocRouterAPIError, NodeOperationError, ValidationError) as e:
                message = _error_message(e)
                if not self.continue_on_fail:
                    logger.error(f"Prompt operation '{op.value}' failed on item {item_index}: {message}")
                    if isinstance(e, NodeOperationError):
                        e.item_index = item_index
                        raise
                    raise NodeOperationError(message, item_index=item_index) from e

                logger.warning(f"Item {item_index} failed, continuing: {message}")
                results.append(
                    NodeItem(json={"error": message}, paired_item=item_index, error=message)
                )

        return results

    async def _run(
        self, op: PromptOperation, organization_id: str, params: dict[str, Any]
    ) -> Any:
        if op == PromptOperation.LIST:
            list_params = PromptListParams(
                limit=params.get("limit", 10),
                skip=params.get("skip", 0),
                document_id=params.get("document_id"),
                tag_ids=params.get("tag_ids"),
                name_search=params.get("name_search"),
            )
            return await self.client.list_prompts(organization_id, list_params)

        if op == PromptOperation.LIST_VERSIONS:
            prompt_id = _required(params, "prompt_id")
            return await self.client.list_prompt_versions(organization_id, prompt_id)

        if op == PromptOperation.GET:
            prompt_revid = _required(params, "prompt_revid")
            return await self.client.get_prompt(organization_id, prompt_revid)

        if op == PromptOperation.CREATE:
            config = self._prompt_config(params)
            return await self.client.create_prompt(organization_id, config)

        if op == PromptOperation.UPDATE:
            prompt_id = _required(params, "prompt_id")
            config = self._prompt_config(params)
            return await self.client.update_prompt(organization_id, prompt_id, config)

        prompt_id = _required(params, "prompt_id")
        return await self.client.delete_prompt(organization_id, prompt_id)

    @staticmethod
    def _prompt_config(params: dict[str, Any]) -> PromptConfig:
        return PromptConfig(
            name=_required(params, "name"),
            content=_required(params, "content"),
            model=params.get("model"),
            schema_id=params.get("schema_id"),
            schema_version=params.get("schema_version"),
            tag_ids=params.get("tag_ids"),
            kb_id=params.get("kb_id"),
        )
