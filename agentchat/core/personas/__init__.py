from .tool_descriptions import (
    ToolDescription,
    ToolDescriptionTemplate,
    CORE_TOOLS,
    DATA_API_TOOLS,
    SUPPORTED_NETWORKS,
    TOOL_TEMPLATES,
    generate_tool_description,
)
from .personalities import (
    Personality,
    PERSONALITIES,
    DEFAULT_PERSONALITY_ID,
    get_personality,
    get_all_personalities,
    has_personality,
)
from .builder import (
    PersonalityBuilder,
    PERSONALITY_TEMPLATES,
    create_personality,
    create_personality_from_template,
    validate_personality,
)
from .prompt import build_system_prompt

__all__ = [
    "ToolDescription",
    "ToolDescriptionTemplate",
    "CORE_TOOLS",
    "DATA_API_TOOLS",
    "SUPPORTED_NETWORKS",
    "TOOL_TEMPLATES",
    "generate_tool_description",
    "Personality",
    "PERSONALITIES",
    "DEFAULT_PERSONALITY_ID",
    "get_personality",
    "get_all_personalities",
    "has_personality",
    "PersonalityBuilder",
    "PERSONALITY_TEMPLATES",
    "create_personality",
    "create_personality_from_template",
    "validate_personality",
    "build_system_prompt",
]
