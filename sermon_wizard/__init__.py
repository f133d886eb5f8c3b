"""Sermon Wizard: guided sermon drafting backed by an LLM."""

__version__ = "0.1.0"
