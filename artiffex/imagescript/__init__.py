"""ImageScript - the structured-prompt language and its compiler."""
from .models import Subject, NamedBlock, ParsedScript, LintError, SET_BLOCK_KINDS
from .parser import parse_script, strip_comments
from .compiler import compile_script, assemble_prompt
from .lint import lint_script

__all__ = [
    "Subject",
    "NamedBlock",
    "ParsedScript",
    "LintError",
    "SET_BLOCK_KINDS",
    "parse_script",
    "strip_comments",
    "compile_script",
    "assemble_prompt",
    "lint_script",
]
