"""Prompt templates and loader."""

from sermon_wizard.prompts.loader import load_prompt, render_prompt

__all__ = ["load_prompt", "render_prompt"]
