"""Response generation: template rendering and prompt assembly."""

from colloquy.alignment.generation.prompt_builder import PromptBuilder

__all__ = ["PromptBuilder"]
