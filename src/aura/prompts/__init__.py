"""Prompt text shipped with Aura.

A file at ./prompts/<name>.txt in the working directory replaces the
packaged copy of the same name.
"""

from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Return the text of prompt ``name``, preferring a local override.

    Raises:
        FileNotFoundError: If neither location has ``<name>.txt``
    """
    filename = f"{name}.txt"

    candidates = [Path.cwd() / "prompts" / filename, _PACKAGE_DIR / filename]
    for candidate in candidates:
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8").strip()
    searched = ", ".join(str(c) for c in candidates)
    raise FileNotFoundError(f"No prompt named '{name}' (looked in {searched})")


def get_persona_prompt() -> str:
    """System instruction that gives the assistant its Aura persona."""
    return load_prompt("persona")


__all__ = ["load_prompt", "get_persona_prompt"]
