"""
ImageScript compiler - flattens a parsed script into one natural-language prompt.

Segment order is fixed: subject, scene name, scene values, then a single
trailing details segment holding style / camera / palette groups.
"""

import re
from typing import List

from artiffex.imagescript.models import ParsedScript
from artiffex.imagescript.parser import parse_script

_COMMA_RUN_RE = re.compile(r",(\s*,)+")

_DETAIL_GROUPS = (
    ("style", "style"),
    ("camera", "camera details"),
    ("palette", "color palette"),
)


def assemble_prompt(parsed: ParsedScript) -> str:
    """Join the parsed pieces into the final prompt (may be empty)."""
    segments: List[str] = []

    if parsed.subject is not None:
        segments.append(f"A {parsed.subject.name}")
        if parsed.subject.values:
            segments.append(", ".join(parsed.subject.values))
    elif parsed.scene.first_name:
        segments.append(f"A scene of {parsed.scene.first_name}")

    if parsed.scene.name:
        segments.append(f"in a {parsed.scene.name}")

    segments.extend(parsed.scene.values)

    details = []
    for kind, label in _DETAIL_GROUPS:
        values = parsed.block(kind).values
        if values:
            details.append(f"{label}: ({', '.join(values)})")
    if details:
        segments.append(", ".join(details))

    # empty values leave runs like ", ,  ," behind
    prompt = ", ".join(s for s in segments if s.strip())
    return _COMMA_RUN_RE.sub(",", prompt)


def compile_script(script: str) -> str:
    """
    Compile an ImageScript document into a prompt.

    Total: when nothing recognisable is found the trimmed input is returned
    unchanged, so plain prose passes straight through.
    """
    source = script or ""
    parsed = parse_script(source)
    if parsed.is_empty:
        return source.strip()
    prompt = assemble_prompt(parsed).strip()
    return prompt or source.strip()
