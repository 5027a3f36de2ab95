from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..providers.llm.base import LLMMessage


class ChatMessage(BaseModel):
    role: str = Field(description="Message role: user or assistant")
    content: Union[str, List[Dict[str, Any]]] = Field(
        default="",
        description="Message text, or a list of content parts of which the text parts are used",
    )

    def text(self) -> str:
        if isinstance(self.content, str):
            return self.content
        return "".join(
            str(part.get("text", ""))
            for part in self.content
            if part.get("type", "text") == "text"
        )

    def to_llm_message(self) -> LLMMessage:
        return LLMMessage(role=self.role, content=self.text())


class ChatRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    messages: List[ChatMessage] = Field(description="Chat conversation history")
    chain_id: Optional[Union[int, str]] = Field(
        default=None, description="EVM chain id; defaults to Base Sepolia"
    )
    personality_id: Optional[str] = Field(default=None, description="Personality to answer as")

    def llm_messages(self) -> List[LLMMessage]:
        return [
            message.to_llm_message()
            for message in self.messages
            if message.role in ("user", "assistant") and message.text()
        ]


class ExportRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    records: List[Dict[str, Any]] = Field(default_factory=list, description="Records to export")
    record_type: str = Field(description="token-balances, token-transfers, transactions or portfolio-summary")
    network: str = Field(description="Network name used in metadata and the filename")
    format: str = Field(description="csv, json, pdf or xlsx")
    filename: Optional[str] = Field(default=None, description="Override the generated filename")
    include_metadata: bool = Field(default=True)
