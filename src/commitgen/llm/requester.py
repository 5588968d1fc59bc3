"""Generation requests against the OpenAI Responses API."""

import json
from typing import Any, Dict, List, Optional

import structlog
from openai import AsyncOpenAI

from commitgen.llm.prompts import PromptTemplates
from commitgen.llm.schema import PROPOSAL_ARGS_FIELD, file_search_tool, proposal_tool
from commitgen.models import RemoteAttachment

logger = structlog.get_logger(__name__)


class CandidateRequester:
    """Asks the model for commit message candidates through a function tool."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        document_name: str = "diff.txt",
    ) -> None:
        """Initialize the requester.

        Args:
            client: OpenAI client
            model: Model name for the Responses API
            document_name: Name the diff is referred to by in prompts
        """
        self.client = client
        self.model = model
        self.document_name = document_name
        self.prompts = PromptTemplates()

    def build_tools(
        self,
        count: int,
        attachment: Optional[RemoteAttachment] = None,
    ) -> List[Dict[str, Any]]:
        """Build the tool list for a request.

        A file search tool is included only when the diff was uploaded.
        """
        tools = []
        if attachment is not None and attachment.index_id:
            tools.append(file_search_tool(attachment.index_id))
        tools.append(proposal_tool(count))
        return tools

    async def request(
        self,
        diff: str,
        count: int,
        attachment: Optional[RemoteAttachment] = None,
    ) -> Any:
        """Issue the generation call.

        Args:
            diff: Staged diff text
            count: Number of candidates to ask for
            attachment: Uploaded diff, if the diff is not inlined

        Returns:
            The Responses API response
        """
        inline_diff = None if attachment is not None else diff

        return await self.client.responses.create(
            model=self.model,
            instructions=self.prompts.instructions(self.document_name),
            input=self.prompts.request_input(count, inline_diff, self.document_name),
            tools=self.build_tools(count, attachment),
        )

    @staticmethod
    def extract_candidates(response: Any) -> List[Any]:
        """Collect candidate objects from every function call in a response.

        Calls whose arguments are not valid JSON, or that lack the ``args``
        field, contribute nothing.

        Args:
            response: Responses API response

        Returns:
            Flattened list of candidate objects, not yet validated
        """
        candidates: List[Any] = []

        for item in response.output or []:
            if getattr(item, "type", None) != "function_call":
                continue

            try:
                arguments = json.loads(item.arguments)
            except (TypeError, ValueError) as e:
                logger.warning(
                    "function_call_unparseable", name=getattr(item, "name", None), error=str(e)
                )
                continue

            args = arguments.get(PROPOSAL_ARGS_FIELD) if isinstance(arguments, dict) else None
            if args is None:
                logger.warning("function_call_missing_args", name=getattr(item, "name", None))
                continue

            if isinstance(args, list):
                candidates.extend(args)
            else:
                candidates.append(args)

        return candidates

    async def generate(
        self,
        diff: str,
        count: int,
        attachment: Optional[RemoteAttachment] = None,
    ) -> List[Any]:
        """Request candidates and collect them from the response.

        Args:
            diff: Staged diff text
            count: Number of candidates to ask for
            attachment: Uploaded diff, if the diff is not inlined

        Returns:
            Unvalidated candidate objects
        """
        response = await self.request(diff, count, attachment)
        candidates = self.extract_candidates(response)
        logger.info("candidates_received", count=len(candidates), requested=count)
        return candidates
