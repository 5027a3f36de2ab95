"""Helpers for defining additional personalities in code."""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .personalities import Personality
from .tool_descriptions import generate_tool_description

_HEX_COLOR = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)


class PersonalityBuilder(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""
    emoji: str = ""
    color: str = ""
    character_traits: str = ""
    additional_context: Optional[str] = None


class PersonalityTemplate(BaseModel):
    character_traits: str
    additional_context: str


PERSONALITY_TEMPLATES: Dict[str, PersonalityTemplate] = {
    "professional": PersonalityTemplate(
        character_traits=(
            "I am a professional assistant who communicates formally and precisely. I provide "
            "comprehensive explanations and maintain business-appropriate language."
        ),
        additional_context="I focus on accuracy and thoroughness in all interactions.",
    ),
    "casual": PersonalityTemplate(
        character_traits=(
            "Hey there! I'm your casual, friendly helper who likes to keep things relaxed and fun. "
            "I explain things in simple terms and use everyday language."
        ),
        additional_context="I'm here to make Web3 accessible and enjoyable for everyone!",
    ),
    "expert": PersonalityTemplate(
        character_traits=(
            "I am a technical expert with deep knowledge and extensive experience. I provide "
            "detailed analysis and advanced insights."
        ),
        additional_context=(
            "I excel at explaining complex concepts and providing in-depth technical guidance."
        ),
    ),
    "mentor": PersonalityTemplate(
        character_traits=(
            "I'm an educational mentor focused on helping you learn step by step. I break down "
            "complex topics and encourage questions."
        ),
        additional_context=(
            "Every interaction is a learning opportunity. Feel free to ask me to explain anything "
            "you don't understand!"
        ),
    ),
}


def create_personality(builder: PersonalityBuilder) -> Personality:
    """Assemble traits, the generated tool block and any extra context."""
    system_prompt = builder.character_traits
    system_prompt += f"\n\n{generate_tool_description(builder.id)}"
    if builder.additional_context:
        system_prompt += f"\n\n{builder.additional_context}"

    return Personality(
        id=builder.id,
        name=builder.name,
        description=builder.description,
        emoji=builder.emoji,
        color=builder.color,
        system_prompt=system_prompt,
    )


def create_personality_from_template(
    template: str,
    *,
    id: str,
    name: str,
    description: str,
    emoji: str,
    color: str,
    character_traits: Optional[str] = None,
    additional_context: Optional[str] = None,
) -> Personality:
    """Create a personality whose traits default to one of PERSONALITY_TEMPLATES."""
    if template not in PERSONALITY_TEMPLATES:
        available = ", ".join(PERSONALITY_TEMPLATES)
        raise ValueError(f"Unknown personality template '{template}'. Available templates: {available}")
    template_data = PERSONALITY_TEMPLATES[template]

    return create_personality(
        PersonalityBuilder(
            id=id,
            name=name,
            description=description,
            emoji=emoji,
            color=color,
            character_traits=character_traits or template_data.character_traits,
            additional_context=additional_context or template_data.additional_context,
        )
    )


def validate_personality(builder: PersonalityBuilder) -> List[str]:
    """Return a list of problems with the builder; empty when it is valid."""
    errors: List[str] = []

    if not builder.id:
        errors.append("ID is required")
    if not builder.name:
        errors.append("Name is required")
    if not builder.description:
        errors.append("Description is required")
    if not builder.emoji:
        errors.append("Emoji is required")
    if not builder.color:
        errors.append("Color is required")
    if not builder.character_traits:
        errors.append("Character traits are required")

    if builder.color and not _HEX_COLOR.match(builder.color):
        errors.append("Color must be in hex format (e.g., #FF0000)")

    return errors
