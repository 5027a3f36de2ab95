from typing import List
from pydantic import BaseModel, Field


class PersonalitySummary(BaseModel):
    id: str
    name: str
    description: str
    emoji: str
    color: str


class PersonalityDetail(PersonalitySummary):
    system_prompt: str = Field(description="Full system prompt including the tool block")


class PersonalitiesResponse(BaseModel):
    personalities: List[PersonalitySummary]
    default: str


class ChainInfo(BaseModel):
    id: int
    name: str
    icon: str
    explorer: str
    rpc_url: str
    factory_address: str
    native_symbol: str
    is_testnet: bool


class ChainsResponse(BaseModel):
    chains: List[ChainInfo]
    default: int
