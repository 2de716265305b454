"""
Tool declarations and dispatch for function-calling drafting cycles.

A ToolRegistry holds the tools the model may call. Its declarations are sent
with every completion request, and ``execute`` runs a tool call once the
model's stream has finished selecting it.
"""

import inspect
import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from voice_bridge.config.constants import LOGGER_NAME
from voice_bridge.errors import ArgumentParseError, UnknownToolError
from voice_bridge.models.openai_schemas import FunctionDefinition, ToolDefinition

logger = logging.getLogger(LOGGER_NAME)


class Tool(BaseModel):
    """A callable tool with the schema the model sees."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    description: str
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )
    handler: Callable[..., Any] = Field(exclude=True)

    def declaration(self) -> FunctionDefinition:
        return FunctionDefinition(
            name=self.name, description=self.description, parameters=self.parameters
        )


class ToolRegistry:
    """Registry of tools available to the model, in declaration order."""

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> Tool:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        return tool

    def tool(
        self, name: str, description: str, parameters: Optional[Dict[str, Any]] = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a function as a tool handler."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            kwargs = {"name": name, "description": description, "handler": func}
            if parameters is not None:
                kwargs["parameters"] = parameters
            self.register(Tool(**kwargs))
            return func

        return decorator

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def declarations(self) -> List[Dict[str, Any]]:
        """Tool schemas as ``{name, description, parameters}`` objects."""
        return [tool.declaration().model_dump() for tool in self._tools.values()]

    def openai_tools(self) -> List[Dict[str, Any]]:
        """Tool schemas in the shape of the chat completion ``tools`` parameter."""
        return [
            ToolDefinition(function=tool.declaration()).model_dump()
            for tool in self._tools.values()
        ]

    async def execute(self, name: str, raw_arguments: str) -> Any:
        """
        Run a tool call.

        Args:
            name: Name of the tool selected by the model
            raw_arguments: JSON object string with the call's arguments

        Returns:
            The handler's result value

        Raises:
            ArgumentParseError: If raw_arguments is not a JSON object
            UnknownToolError: If no tool is registered under name
            ToolNotFoundError: Raised by lookup handlers that find nothing
        """
        arguments = parse_arguments(name, raw_arguments)

        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)

        logger.info(f"Executing tool {name} with arguments {arguments}")
        result = tool.handler(**arguments)
        if inspect.isawaitable(result):
            result = await result
        return result


def parse_arguments(name: str, raw_arguments: Optional[str]) -> Dict[str, Any]:
    """Parse a tool call's argument string into keyword arguments."""
    if raw_arguments is None or not raw_arguments.strip():
        return {}
    try:
        arguments = json.loads(raw_arguments)
    except json.JSONDecodeError as e:
        raise ArgumentParseError(name, f"Invalid arguments for {name}: {e}") from e
    if not isinstance(arguments, dict):
        raise ArgumentParseError(name, f"Arguments for {name} must be a JSON object")
    return arguments


def render_tool_result(result: Any) -> str:
    """Render a tool result as text the agent can speak."""
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    if isinstance(result, BaseModel):
        result = result.model_dump()
    if isinstance(result, Mapping):
        return ", ".join(f"{key}: {render_tool_result(value)}" for key, value in result.items())
    if isinstance(result, (list, tuple)):
        if not result:
            return "No results found."
        return "; ".join(render_tool_result(item) for item in result)
    return str(result)
