"""
ImageScript parser.

Grammar (braces never nest):

    script       := (comment | create_block | set_block | other)*
    create_block := "create" IDENT STRING "{" property* "}"
    set_block    := "set" IDENT [STRING] "{" property* "}"
    property     := IDENT ":" STRING ";"

Parsing is best-effort: blocks that do not match exactly are skipped, never
reported. Only the first `create` block is honoured.
"""

import re

from artiffex.imagescript.models import Subject, NamedBlock, ParsedScript, SET_BLOCK_KINDS

_COMMENT_RE = re.compile(r"//.*")
_NEWLINES_RE = re.compile(r"[\r\n]+")
_CREATE_RE = re.compile(r'\bcreate\s+(\w+)\s+"([^"]+)"\s*\{([^}]+)\}')
_SET_RE = re.compile(r'\bset\s+(\w+)(?:\s+"([^"]+)")?\s*\{([^}]+)\}')
# label is optional: values are every quoted string that follows a colon
_PROPERTY_RE = re.compile(r'(?:(\w+)\s*)?:\s*"([^"]+)"')


def strip_comments(script: str) -> str:
    """Drop `//` comments, then fold the script onto a single line."""
    without_comments = _COMMENT_RE.sub("", script)
    return _NEWLINES_RE.sub(" ", without_comments)


def _properties(body: str):
    return [(label or "", text) for label, text in _PROPERTY_RE.findall(body)]


def parse_script(script: str) -> ParsedScript:
    """Recover the subject and set-blocks of a script. Never raises."""
    cleaned = strip_comments(script or "")
    parsed = ParsedScript()

    creates = list(_CREATE_RE.finditer(cleaned))
    if creates:
        first = creates[0]
        parsed.subject = Subject(
            kind=first.group(1),
            name=first.group(2),
            attributes=_properties(first.group(3)),
        )
        parsed.ignored_create_blocks = len(creates) - 1

    for match in _SET_RE.finditer(cleaned):
        kind, name, body = match.group(1), match.group(2), match.group(3)
        if kind not in SET_BLOCK_KINDS:
            continue
        block: NamedBlock = parsed.block(kind)
        if kind == "scene" and name:
            if block.first_name is None:
                block.first_name = name
            block.name = name
        block.attributes.extend(_properties(body))

    return parsed
