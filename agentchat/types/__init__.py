from .requests import ChatMessage, ChatRequest, ExportRequest
from .responses import (
    ChainInfo,
    ChainsResponse,
    PersonalitiesResponse,
    PersonalityDetail,
    PersonalitySummary,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ExportRequest",
    "ChainInfo",
    "ChainsResponse",
    "PersonalitiesResponse",
    "PersonalityDetail",
    "PersonalitySummary",
]
