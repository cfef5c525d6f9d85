"""
ImageScript intermediate structures.
Produced while compiling a script and discarded afterwards; nothing here is
retained between compilations.
"""

from typing import Optional, List, Tuple
from pydantic import BaseModel, Field


# set-block kinds that contribute to the prompt, in assembly order
SET_BLOCK_KINDS = ("scene", "style", "camera", "palette")


class Subject(BaseModel):
    """The primary subject declared by a `create` block."""
    kind: str
    name: str
    attributes: List[Tuple[str, str]] = Field(default_factory=list)  # (label, text), duplicates kept

    @property
    def values(self) -> List[str]:
        return [text for _, text in self.attributes]


class NamedBlock(BaseModel):
    """Accumulated attributes of every `set <kind>` block of one kind."""
    kind: str
    name: Optional[str] = None  # scene only; last matched occurrence wins
    first_name: Optional[str] = None  # scene only; used for the subject fallback
    attributes: List[Tuple[str, str]] = Field(default_factory=list)

    @property
    def values(self) -> List[str]:
        return [text for _, text in self.attributes]


class ParsedScript(BaseModel):
    """Structure recovered from one script."""
    subject: Optional[Subject] = None
    scene: NamedBlock = Field(default_factory=lambda: NamedBlock(kind="scene"))
    style: NamedBlock = Field(default_factory=lambda: NamedBlock(kind="style"))
    camera: NamedBlock = Field(default_factory=lambda: NamedBlock(kind="camera"))
    palette: NamedBlock = Field(default_factory=lambda: NamedBlock(kind="palette"))
    ignored_create_blocks: int = 0

    def block(self, kind: str) -> Optional[NamedBlock]:
        if kind not in SET_BLOCK_KINDS:
            return None
        return getattr(self, kind)

    @property
    def is_empty(self) -> bool:
        return self.subject is None and not any(
            self.block(k).attributes or self.block(k).name for k in SET_BLOCK_KINDS
        )


class LintError(BaseModel):
    """A single editor diagnostic."""
    line: int
    message: str
