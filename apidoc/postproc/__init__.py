"""Post-processing for generated Markdown."""

from .lint import MarkdownLinter

__all__ = ["MarkdownLinter"]
