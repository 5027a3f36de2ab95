"""
Action-provider framework.

An action provider groups named actions the model can call. Every action
validates its raw arguments through a pydantic schema and reports failures as
an error dict instead of raising, so a broken tool call never ends the chat.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from ...providers.llm.base import ToolDefinition

logger = logging.getLogger(__name__)

ActionHandler = Callable[[Any], Coroutine[Any, Any, Any]]


def success_result(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    result: Dict[str, Any] = {"success": True}
    if data is not None:
        result["data"] = data
    if message is not None:
        result["message"] = message
    return result


def error_result(error: str) -> Dict[str, Any]:
    return {"success": False, "error": error}


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into `field: message` pairs."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        parts.append(f"{location}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


@dataclass
class Action:
    """A single callable tool exposed to the model."""
    name: str
    description: str
    schema: Type[BaseModel]
    handler: ActionHandler

    def definition(self) -> ToolDefinition:
        input_schema = self.schema.model_json_schema()
        input_schema.pop("title", None)
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=input_schema,
        )

    async def invoke(self, arguments: Optional[Dict[str, Any]]) -> Any:
        try:
            params = self.schema.model_validate(arguments or {})
        except ValidationError as exc:
            return error_result(f"Invalid arguments for {self.name}: {describe_validation_error(exc)}")

        try:
            return await self.handler(params)
        except Exception as exc:
            logger.warning("Action %s failed: %s", self.name, exc)
            return error_result(str(exc) or exc.__class__.__name__)


class ActionProvider(ABC):
    """Base class for a group of actions created for one chat request."""

    name: str = "provider"

    def supports_network(self, chain_id: int) -> bool:
        return True

    @abstractmethod
    def get_actions(self) -> List[Action]:
        pass
