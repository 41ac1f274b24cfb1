"""
Prompt loading and formatting utilities.

Prompt templates live as markdown files under ``src/prompts/<category>/``
and use ``{variable}`` placeholders.
"""

from pathlib import Path


PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


def load_prompt(name: str, category: str) -> str:
    """
    Load a prompt template from a markdown file.
    
    Args:
        name: The prompt name (e.g., "system", "user")
        category: The prompt category (e.g., "matching", "grouping")
    
    Returns:
        The prompt template as a string
    
    Raises:
        FileNotFoundError: If the prompt file doesn't exist
    """
    prompt_path = PROMPTS_DIR / category / f"{name}.md"
    
    if not prompt_path.exists():
        raise FileNotFoundError(
            f"Prompt file not found: {prompt_path}. "
            f"Expected prompt '{name}' in category '{category}'."
        )
    
    return prompt_path.read_text(encoding="utf-8")


def format_prompt(template: str, **kwargs) -> str:
    """
    Format a prompt template with variable substitution.
    
    Uses plain ``{variable}`` replacement so literal JSON braces in the
    template are left alone.
    """
    result = template
    for key, value in kwargs.items():
        placeholder = "{" + key + "}"
        result = result.replace(placeholder, str(value))
    return result


def render_prompt(name: str, category: str, **kwargs) -> str:
    """Load a template and substitute its variables."""
    return format_prompt(load_prompt(name, category), **kwargs).strip()
