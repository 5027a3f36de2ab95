"""
Personality registry.

Each personality is a character voice for the assistant. The character text
lives in ``characters/<id>.yaml``; the ``{tools}`` marker in its
``system_prompt`` is replaced by the tool block rendered in that character's
voice. Everything is built once at import time and never mutated afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .tool_descriptions import generate_tool_description

logger = logging.getLogger(__name__)

CHARACTERS_DIR = Path(__file__).parent / "characters"
TOOLS_MARKER = "{tools}"

# Declaration order is the order clients list them in
PERSONALITY_IDS: tuple[str, ...] = ("elon", "trump", "gensler", "peewee", "rambo")
DEFAULT_PERSONALITY_ID = "elon"


class PersonalityLoadError(RuntimeError):
    """Raised when a character file is missing or malformed."""


class Personality(BaseModel):
    """A character the assistant can speak as."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Personality identifier")
    name: str = Field(description="Display name")
    description: str = Field(description="One-line summary shown in selectors")
    emoji: str = Field(description="Avatar emoji")
    color: str = Field(description="Accent colour as #RRGGBB")
    system_prompt: str = Field(description="Character text combined with the tool block")

    def summary(self) -> Dict[str, str]:
        """Public fields without the (long) system prompt."""
        return self.model_dump(exclude={"system_prompt"})


def _load_character(personality_id: str, directory: Path) -> Personality:
    path = directory / f"{personality_id}.yaml"
    try:
        with open(path, "r", encoding="utf-8") as f:
            data: Dict[str, Any] = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise PersonalityLoadError(f"Character file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise PersonalityLoadError(f"Invalid character file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise PersonalityLoadError(f"Character file {path} must contain a mapping")
    if data.get("id") != personality_id:
        raise PersonalityLoadError(
            f"Character file {path} declares id {data.get('id')!r}, expected {personality_id!r}"
        )

    character_text = str(data["system_prompt"]).strip()
    tool_block = generate_tool_description(personality_id)
    if TOOLS_MARKER in character_text:
        system_prompt = character_text.replace(TOOLS_MARKER, tool_block)
    else:
        system_prompt = f"{character_text}\n\n{tool_block}"

    return Personality(
        id=personality_id,
        name=data["name"],
        description=data["description"],
        emoji=data["emoji"],
        color=data["color"],
        system_prompt=system_prompt,
    )


def load_personalities(
    ids: tuple[str, ...] = PERSONALITY_IDS,
    directory: Path = CHARACTERS_DIR,
) -> Dict[str, Personality]:
    personalities = {pid: _load_character(pid, directory) for pid in ids}
    logger.debug("Loaded %d personalities from %s", len(personalities), directory)
    return personalities


PERSONALITIES: Mapping[str, Personality] = MappingProxyType(load_personalities())


def get_personality(personality_id: str | None) -> Personality:
    """Get personality by id, defaulting to the default personality if not found."""
    if personality_id and personality_id in PERSONALITIES:
        return PERSONALITIES[personality_id]
    return PERSONALITIES[DEFAULT_PERSONALITY_ID]


def has_personality(personality_id: str) -> bool:
    return personality_id in PERSONALITIES


def get_all_personalities() -> List[Personality]:
    return list(PERSONALITIES.values())
