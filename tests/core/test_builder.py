import pytest

from agentchat.core.personas import (
    PERSONALITY_TEMPLATES,
    PersonalityBuilder,
    create_personality,
    create_personality_from_template,
    generate_tool_description,
    validate_personality,
)


def _builder(**overrides):
    data = dict(
        id="satoshi",
        name="Satoshi",
        description="Mysterious founder",
        emoji="🕵️",
        color="#123ABC",
        character_traits="I speak rarely.",
    )
    data.update(overrides)
    return PersonalityBuilder(**data)


def test_valid_builder_has_no_errors():
    assert validate_personality(_builder()) == []


def test_empty_builder_lists_every_missing_field():
    errors = validate_personality(PersonalityBuilder())
    assert errors == [
        "ID is required",
        "Name is required",
        "Description is required",
        "Emoji is required",
        "Color is required",
        "Character traits are required",
    ]


@pytest.mark.parametrize("color", ["red", "#12345", "#GGGGGG", "123456"])
def test_bad_color_is_reported(color):
    assert validate_personality(_builder(color=color)) == ["Color must be in hex format (e.g., #FF0000)"]


def test_create_personality_composes_prompt():
    personality = create_personality(_builder(additional_context="Trust the math."))
    assert personality.system_prompt == (
        "I speak rarely.\n\n" + generate_tool_description("satoshi") + "\n\nTrust the math."
    )


def test_template_supplies_defaults():
    personality = create_personality_from_template(
        "mentor", id="prof", name="Prof", description="d", emoji="🎓", color="#FFFFFF"
    )
    template = PERSONALITY_TEMPLATES["mentor"]
    assert personality.system_prompt.startswith(template.character_traits)
    assert personality.system_prompt.endswith(template.additional_context)


def test_unknown_template_raises():
    with pytest.raises(ValueError, match="Available templates: professional, casual, expert, mentor"):
        create_personality_from_template(
            "pirate", id="p", name="P", description="d", emoji="🏴", color="#000000"
        )
