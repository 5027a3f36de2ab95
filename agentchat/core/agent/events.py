from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

StreamEventType = Literal["text-delta", "tool-call", "tool-result", "error", "finish"]


class StreamEvent(BaseModel):
    """One event relayed to the client while the agent runs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: StreamEventType
    text_delta: Optional[str] = None
    tool_call_id: Optional[str] = None
    tool_name: Optional[str] = None
    args: Optional[Dict[str, Any]] = None
    result: Any = None
    error: Optional[str] = None
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, Any]] = Field(default=None)

    @classmethod
    def text(cls, delta: str) -> "StreamEvent":
        return cls(type="text-delta", text_delta=delta)

    @classmethod
    def tool_call(cls, tool_call_id: str, tool_name: str, args: Dict[str, Any]) -> "StreamEvent":
        return cls(type="tool-call", tool_call_id=tool_call_id, tool_name=tool_name, args=args)

    @classmethod
    def tool_result(cls, tool_call_id: str, tool_name: str, result: Any) -> "StreamEvent":
        return cls(type="tool-result", tool_call_id=tool_call_id, tool_name=tool_name, result=result)

    @classmethod
    def failure(cls, message: str) -> "StreamEvent":
        return cls(type="error", error=message)

    @classmethod
    def finish(cls, reason: str, usage: Optional[Dict[str, Any]] = None) -> "StreamEvent":
        return cls(type="finish", finish_reason=reason, usage=usage)

    def to_payload(self) -> Dict[str, Any]:
        """Wire shape: camelCase keys, unset fields omitted."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        if self.type == "tool-result" and "result" not in payload:
            payload["result"] = None
        return payload
