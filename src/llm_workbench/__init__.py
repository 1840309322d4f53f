"""Workspace shell: working-directory selection and LLM provider/model settings."""

__version__ = "0.1.0"
