"""Utility functions for loading prompt text files."""
from pathlib import Path
import typing as t


def load_prompt(prompt_name: str, prompts_dir: t.Optional[str] = None) -> str:
    """
    Load a prompt from a text file.
    
    Args:
        prompt_name: Name of the prompt file (without .txt extension)
        prompts_dir: Optional custom path to prompts directory. 
                    Defaults to this module's parent directory.
    
    Returns:
        The content of the prompt file as a string.
        
    Raises:
        FileNotFoundError: If the prompt file doesn't exist.
    """
    if prompts_dir is None:
        prompts_dir = Path(__file__).resolve().parent
    
    prompt_file = Path(prompts_dir) / f"{prompt_name}.txt"
    
    if not prompt_file.exists():
        raise FileNotFoundError(f"Prompt file not found: {prompt_file}")
    
    return prompt_file.read_text(encoding="utf-8")


def render_prompt(template: str, **values: str) -> str:
    """Substitute ``{NAME}`` placeholders in a prompt template.

    Plain replacement is used so JSON braces in the template are left alone.
    """
    for name, value in values.items():
        template = template.replace("{" + name + "}", value)
    return template
