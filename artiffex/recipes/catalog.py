"""Display titles and palette sections for every node kind."""

from typing import Dict, List, Any

from artiffex.workflow.models import NodeKind

NODE_TITLES: Dict[NodeKind, str] = {
    NodeKind.SOURCE_UPLOAD: "Upload Image",
    NodeKind.SOURCE_GENERATE: "Generate (Prompt)",
    NodeKind.SOURCE_IMAGESCRIPT: "Generate (ImageScript)",
    NodeKind.STYLE: "Change Style (Custom)",
    NodeKind.THREE_D: "Make 3D",
    NodeKind.EDIT: "Edit Image",
    NodeKind.RESIZE: "Resize & Reframe",
    NodeKind.PROMPT_MAGIC: "Creative Boost",
    NodeKind.DREAMSCAPE: "Dreamscape",
    NodeKind.STORYBOOK: "Storybook Style",
    NodeKind.GLITCHMANCY: "Artistic Glitch",
    NodeKind.OIL_PAINTING: "Oil Painting",
    NodeKind.WATERCOLOR: "Watercolor",
    NodeKind.PENCIL_SKETCH: "Pencil Sketch",
    NodeKind.CHARCOAL_DRAWING: "Charcoal Drawing",
    NodeKind.COMIC_BOOK: "Comic Book",
    NodeKind.POP_ART: "Pop Art",
    NodeKind.IMPRESSIONISM: "Impressionism",
    NodeKind.ABSTRACT: "Abstract",
    NodeKind.POINTILLISM: "Pointillism",
    NodeKind.STAINED_GLASS: "Stained Glass",
    NodeKind.VINTAGE_PHOTO: "Vintage Photo",
    NodeKind.BLACK_AND_WHITE: "Black & White",
    NodeKind.LONG_EXPOSURE: "Long Exposure",
    NodeKind.BOKEH: "Bokeh",
    NodeKind.HDR: "HDR",
    NodeKind.DUOTONE: "Duotone",
    NodeKind.PINHOLE: "Pinhole Camera",
    NodeKind.LOMO: "Lomography",
    NodeKind.TILT_SHIFT: "Tilt-Shift",
    NodeKind.NIGHT_VISION: "Night Vision",
    NodeKind.PIXELATE: "Pixelate",
    NodeKind.GLITCH: "Glitch Art",
    NodeKind.KALEIDOSCOPE: "Kaleidoscope",
    NodeKind.ASCII: "ASCII Art",
    NodeKind.LOW_POLY: "Low Poly",
    NodeKind.HALFTONE: "Halftone",
    NodeKind.ANAGLYPH: "Anaglyph 3D",
    NodeKind.SCANLINES: "Scanlines",
    NodeKind.INVERT: "Invert Colors",
    NodeKind.LIQUIFY: "Liquify",
    NodeKind.CYBERPUNK: "Cyberpunk",
    NodeKind.STEAMPUNK: "Steampunk",
    NodeKind.FANTASY: "Fantasy",
    NodeKind.SCI_FI: "Sci-Fi",
    NodeKind.MINIMALIST: "Minimalist",
    NodeKind.VAPORWAVE: "Vaporwave",
    NodeKind.GOTHIC: "Gothic",
    NodeKind.ART_DECO: "Art Deco",
    NodeKind.GRUNGE: "Grunge",
    NodeKind.HOLOGRAM: "Hologram",
    NodeKind.STICKERIZE: "Stickerize",
    NodeKind.LEGO: "Lego Bricks",
    NodeKind.CLAYMATION: "Claymation",
    NodeKind.BLUEPRINT: "Blueprint",
    NodeKind.NEON_GLOW: "Neon Glow",
    NodeKind.GENERATE_PODCAST: "Generate Podcast",
    NodeKind.VEO_VIDEO: "Generate Video (Veo)",
}

KIND_CATEGORIES: Dict[str, List[NodeKind]] = {
    "source": [NodeKind.SOURCE_UPLOAD, NodeKind.SOURCE_GENERATE, NodeKind.SOURCE_IMAGESCRIPT],
    "core": [NodeKind.EDIT, NodeKind.RESIZE, NodeKind.STYLE, NodeKind.THREE_D],
    "creative_ai": [NodeKind.PROMPT_MAGIC, NodeKind.GENERATE_PODCAST, NodeKind.VEO_VIDEO],
    "surreal": [NodeKind.DREAMSCAPE, NodeKind.STORYBOOK, NodeKind.GLITCHMANCY],
    "artistic": [
        NodeKind.OIL_PAINTING, NodeKind.WATERCOLOR, NodeKind.PENCIL_SKETCH, NodeKind.CHARCOAL_DRAWING,
        NodeKind.COMIC_BOOK, NodeKind.POP_ART, NodeKind.IMPRESSIONISM, NodeKind.ABSTRACT,
        NodeKind.POINTILLISM, NodeKind.STAINED_GLASS,
    ],
    "photographic": [
        NodeKind.VINTAGE_PHOTO, NodeKind.BLACK_AND_WHITE, NodeKind.LONG_EXPOSURE, NodeKind.BOKEH,
        NodeKind.HDR, NodeKind.DUOTONE, NodeKind.PINHOLE, NodeKind.LOMO, NodeKind.TILT_SHIFT,
        NodeKind.NIGHT_VISION,
    ],
    "digital": [
        NodeKind.PIXELATE, NodeKind.GLITCH, NodeKind.KALEIDOSCOPE, NodeKind.ASCII, NodeKind.LOW_POLY,
        NodeKind.HALFTONE, NodeKind.ANAGLYPH, NodeKind.SCANLINES, NodeKind.INVERT, NodeKind.LIQUIFY,
    ],
    "thematic": [
        NodeKind.CYBERPUNK, NodeKind.STEAMPUNK, NodeKind.FANTASY, NodeKind.SCI_FI, NodeKind.MINIMALIST,
        NodeKind.VAPORWAVE, NodeKind.GOTHIC, NodeKind.ART_DECO, NodeKind.GRUNGE, NodeKind.HOLOGRAM,
    ],
    "creative": [
        NodeKind.STICKERIZE, NodeKind.LEGO, NodeKind.CLAYMATION, NodeKind.BLUEPRINT, NodeKind.NEON_GLOW,
    ],
}


def list_kinds() -> List[Dict[str, Any]]:
    """Palette listing for the canvas menu."""
    return [
        {
            "category": category,
            "kind": kind.value,
            "title": NODE_TITLES[kind],
            "is_source": kind.is_source,
        }
        for category, kinds in KIND_CATEGORIES.items()
        for kind in kinds
    ]
