"""
Tool dispatcher.

Maps a tool name and an untyped argument bag onto a validated call against
the memegen API (or the local URL builder) and returns the result as
pretty-printed JSON text. Both the MCP and HTTP transports go through here.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

from pydantic import BaseModel, ValidationError

from memegen_mcp.config import Settings, get_settings
from memegen_mcp.schemas.memegen import (
    CreateMemeArgs,
    GetTemplateInfoArgs,
    ListTemplatesArgs,
    MemeUrlResponse,
    SearchTemplatesArgs,
    TemplateNotFound,
    TemplateSummary,
)
from memegen_mcp.services.memegen import MemegenService
from memegen_mcp.services.url_builder import build_meme_url

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """Base exception for tool dispatch errors."""
    pass


class UnknownToolError(ToolError):
    """Raised when the requested tool name is not registered."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Unknown tool: {tool}")


class InvalidArgumentsError(ToolError):
    """Raised when tool arguments fail validation. No I/O has happened yet."""

    def __init__(self, tool: str, errors: list[dict[str, Any]]):
        self.tool = tool
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or '<arguments>'}: {err['msg']}"
            for err in errors
        )
        super().__init__(f"Invalid arguments for tool '{tool}': {details}")


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool: its argument model and the coroutine that serves it."""

    name: str
    description: str
    arguments: type[BaseModel]
    handler: Callable[[Any], Awaitable[Any]]

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.arguments.model_json_schema()


def to_json_text(payload: Any) -> str:
    """Serialize a result the way every tool returns it: indented JSON."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    elif isinstance(payload, list):
        payload = [
            item.model_dump(mode="json") if isinstance(item, BaseModel) else item
            for item in payload
        ]
    return json.dumps(payload, indent=2, ensure_ascii=False)


class ToolDispatcher:
    """
    Registry and dispatcher for the memegen tools.

    Holds no per-call state; one instance can serve every request.
    """

    def __init__(
        self,
        memegen_service: Optional[MemegenService] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.memegen = memegen_service or MemegenService(self.settings)
        self._tools: dict[str, ToolSpec] = {
            spec.name: spec
            for spec in (
                ToolSpec(
                    name="list_templates",
                    description="List available meme templates from memegen.link",
                    arguments=ListTemplatesArgs,
                    handler=self.list_templates,
                ),
                ToolSpec(
                    name="create_meme",
                    description="Generate a meme image URL with custom text",
                    arguments=CreateMemeArgs,
                    handler=self.create_meme,
                ),
                ToolSpec(
                    name="search_templates",
                    description="Search for meme templates by keyword",
                    arguments=SearchTemplatesArgs,
                    handler=self.search_templates,
                ),
                ToolSpec(
                    name="get_template_info",
                    description="Get detailed information about a specific meme template",
                    arguments=GetTemplateInfoArgs,
                    handler=self.get_template_info,
                ),
            )
        }

    @property
    def tools(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def get_tool(self, name: str) -> ToolSpec:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def parse_arguments(self, name: str, arguments: Any) -> BaseModel:
        """
        Validate raw arguments against the tool's model.

        Raises:
            UnknownToolError: If no tool has this name
            InvalidArgumentsError: If the arguments do not fit the model
        """
        spec = self.get_tool(name)
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgumentsError(name, [{"loc": (), "msg": "Arguments must be an object"}])
        try:
            return spec.arguments.model_validate(dict(arguments))
        except ValidationError as e:
            logger.warning(f"Rejected arguments for {name}: {e.error_count()} error(s)")
            raise InvalidArgumentsError(name, e.errors(include_url=False, include_input=False)) from e

    async def call(self, name: str, arguments: Any = None) -> str:
        """
        Run a tool and return its JSON text payload.

        Raises:
            UnknownToolError: Unknown tool name
            InvalidArgumentsError: Arguments failed validation
            MemegenServiceError: The upstream API call failed
        """
        args = self.parse_arguments(name, arguments)
        logger.info(f"Calling tool {name}")
        logger.debug(f"{name} arguments: {args.model_dump(exclude_none=True)}")
        result = await self._tools[name].handler(args)
        return to_json_text(result)

    # =========================================================================
    # TOOL IMPLEMENTATIONS
    # =========================================================================

    async def list_templates(self, args: ListTemplatesArgs) -> list[TemplateSummary]:
        templates = await self.memegen.fetch_templates(args.filter, args.animated)
        return [TemplateSummary.from_template(t) for t in templates]

    async def search_templates(self, args: SearchTemplatesArgs) -> list[TemplateSummary]:
        # The full list is fetched and matched locally; the server-side
        # filter used by list_templates is not involved.
        templates = await self.memegen.fetch_templates()
        query = args.query.lower()
        matches = [t for t in templates if query in t.search_text]
        logger.info(f"search_templates '{args.query}' matched {len(matches)} of {len(templates)}")
        return [TemplateSummary.from_template(t) for t in matches]

    async def get_template_info(self, args: GetTemplateInfoArgs) -> dict[str, Any]:
        document = await self.memegen.get_template(args.template_id)
        if document is None:
            return TemplateNotFound.for_id(args.template_id).model_dump()
        return document

    async def create_meme(self, args: CreateMemeArgs) -> MemeUrlResponse:
        url = build_meme_url(
            args.template_id,
            args.resolve_text_lines(),
            style=args.style,
            font=args.font,
            extension=args.extension.value,
            base_url=self.settings.MEMEGEN_API_BASE,
        )
        return MemeUrlResponse(url=url, template_id=args.template_id)
