"""
Workflow schema - node kinds, execution status, nodes and edges.
A pipeline is a forest of out-trees: each node holds at most one parent
reference and edges are derived from those references.
"""

import uuid
from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from artiffex.exceptions import FailureKind


class NodeKind(str, Enum):
    """Every node kind offered on the canvas palette."""
    # Sources
    SOURCE_UPLOAD = "source-upload"
    SOURCE_GENERATE = "source-generate"
    SOURCE_IMAGESCRIPT = "source-imagescript"
    # Core operations
    STYLE = "op-style"
    THREE_D = "op-3d"
    EDIT = "op-edit"
    RESIZE = "op-resize"
    # Creative tools
    PROMPT_MAGIC = "op-prompt-magic"
    # Surreal & whimsical
    DREAMSCAPE = "op-dreamscape"
    STORYBOOK = "op-storybook"
    GLITCHMANCY = "op-glitchmancy"
    # Artistic
    OIL_PAINTING = "op-oil-painting"
    WATERCOLOR = "op-watercolor"
    PENCIL_SKETCH = "op-pencil-sketch"
    CHARCOAL_DRAWING = "op-charcoal-drawing"
    COMIC_BOOK = "op-comic-book"
    POP_ART = "op-pop-art"
    IMPRESSIONISM = "op-impressionism"
    ABSTRACT = "op-abstract"
    POINTILLISM = "op-pointillism"
    STAINED_GLASS = "op-stained-glass"
    # Photographic
    VINTAGE_PHOTO = "op-vintage-photo"
    BLACK_AND_WHITE = "op-bw"
    LONG_EXPOSURE = "op-long-exposure"
    BOKEH = "op-bokeh"
    HDR = "op-hdr"
    DUOTONE = "op-duotone"
    PINHOLE = "op-pinhole"
    LOMO = "op-lomo"
    TILT_SHIFT = "op-tilt-shift"
    NIGHT_VISION = "op-night-vision"
    # Digital
    PIXELATE = "op-pixelate"
    GLITCH = "op-glitch"
    KALEIDOSCOPE = "op-kaleidoscope"
    ASCII = "op-ascii"
    LOW_POLY = "op-low-poly"
    HALFTONE = "op-halftone"
    ANAGLYPH = "op-anaglyph"
    SCANLINES = "op-scanlines"
    INVERT = "op-invert"
    LIQUIFY = "op-liquify"
    # Thematic
    CYBERPUNK = "op-cyberpunk"
    STEAMPUNK = "op-steampunk"
    FANTASY = "op-fantasy"
    SCI_FI = "op-sci-fi"
    MINIMALIST = "op-minimalist"
    VAPORWAVE = "op-vaporwave"
    GOTHIC = "op-gothic"
    ART_DECO = "op-art-deco"
    GRUNGE = "op-grunge"
    HOLOGRAM = "op-hologram"
    # Creative additions
    STICKERIZE = "op-stickerize"
    LEGO = "op-lego"
    CLAYMATION = "op-claymation"
    BLUEPRINT = "op-blueprint"
    NEON_GLOW = "op-neon-glow"
    # Multimedia
    GENERATE_PODCAST = "op-generate-podcast"
    VEO_VIDEO = "op-veo-video"

    @property
    def is_source(self) -> bool:
        return self.value.startswith("source-")


class NodeStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    READY = "ready"
    FAILED = "failed"


# running -> idle is deliberately absent: in-flight generations cannot be cancelled
VALID_TRANSITIONS: Dict[NodeStatus, tuple] = {
    NodeStatus.IDLE: (NodeStatus.RUNNING,),
    NodeStatus.READY: (NodeStatus.RUNNING,),
    NodeStatus.FAILED: (NodeStatus.RUNNING,),
    NodeStatus.RUNNING: (NodeStatus.READY, NodeStatus.FAILED),
}


class NodeError(BaseModel):
    """Why the last execution of a node failed."""
    kind: FailureKind = FailureKind.UNKNOWN
    message: str = ""


class WorkflowNode(BaseModel):
    """A single step in a pipeline."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: f"node-{uuid.uuid4().hex[:12]}")
    kind: NodeKind
    parent_id: Optional[str] = None

    # Prompt inputs
    base_prompt: Optional[str] = None  # upstream description this node operates on
    custom_text: Optional[str] = None  # user-entered parameters (style, edit instruction, ...)
    prompt: Optional[str] = None  # free prompt for source-generate
    script: Optional[str] = None  # ImageScript source for source-imagescript
    enhanced_prompt: Optional[str] = None  # creative-boost output
    aspect_ratio: str = "1:1"

    # Artifacts (handles only, owned by the generation service)
    input_ref: Optional[str] = None
    input_mime_type: Optional[str] = None
    output_ref: Optional[str] = None
    text_output: Optional[str] = None  # podcast script
    video_complete: bool = False

    # Execution
    status: NodeStatus = NodeStatus.IDLE
    error: Optional[NodeError] = None
    generation_id: Optional[str] = None

    position: Dict[str, float] = Field(default_factory=lambda: {"x": 0, "y": 0})
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def has_ready_output(self) -> bool:
        return self.status == NodeStatus.READY and bool(self.output_ref)


class Edge(BaseModel):
    """A directed parent -> child link."""
    edge_id: str
    source_id: str
    target_id: str

    @classmethod
    def between(cls, source_id: str, target_id: str) -> "Edge":
        return cls(edge_id=f"edge-{source_id}-{target_id}", source_id=source_id, target_id=target_id)
