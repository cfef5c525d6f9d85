"""
Recipe Registry - per-kind prompt transformations.

A recipe is a pure function `(base_prompt, custom_text) -> prompt`. The
default table must account for every NodeKind: either a recipe, or an
explicit entry in NON_RECIPE_KINDS for kinds the executor handles another
way. The check runs at import, so adding a kind without deciding its recipe
fails loudly instead of silently falling back to the base prompt.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from artiffex.workflow.models import NodeKind

logger = logging.getLogger(__name__)

Recipe = Callable[[str, str], str]


def _suffix(phrase: str) -> Recipe:
    return lambda base, _: f"{base}, {phrase}"


def _wrap(template: str) -> Recipe:
    return lambda base, _: template.format(base=base)


DEFAULT_RECIPES: Dict[NodeKind, Recipe] = {
    NodeKind.SOURCE_GENERATE: lambda _, custom: custom,
    NodeKind.STYLE: lambda base, custom: f"{base}, in the style of {custom}",
    NodeKind.THREE_D: lambda base, custom: f"A 3D render of: {base}. {custom or 'photorealistic'}",
    NodeKind.EDIT: lambda base, custom: f"{base}, edited to {custom}",
    NodeKind.RESIZE: lambda base, _: base,
    NodeKind.PROMPT_MAGIC: lambda base, custom: custom or base,
    # Surreal & whimsical
    NodeKind.DREAMSCAPE: _suffix("in a surreal, dreamy, ethereal style, with swirling colors and abstract shapes, vaporous, atmospheric"),
    NodeKind.STORYBOOK: _suffix("in the style of a classic children's storybook illustration, with charming characters and a whimsical feel"),
    NodeKind.GLITCHMANCY: _suffix("an artistic glitch effect, with beautiful digital decay, chromatic aberration, and pixel sorting aesthetics"),
    # Artistic
    NodeKind.OIL_PAINTING: _suffix("in a lush, textured oil painting style"),
    NodeKind.WATERCOLOR: _suffix("in a soft, blended watercolor style"),
    NodeKind.PENCIL_SKETCH: _suffix("as a detailed, monochrome pencil sketch"),
    NodeKind.CHARCOAL_DRAWING: _suffix("as a dramatic charcoal drawing"),
    NodeKind.COMIC_BOOK: _suffix("in a bold, graphic comic book art style with halftone dots"),
    NodeKind.POP_ART: _suffix("in the style of Andy Warhol pop art"),
    NodeKind.IMPRESSIONISM: _suffix("in the style of Impressionist painting with visible brushstrokes"),
    NodeKind.ABSTRACT: _wrap("An abstract interpretation of {base}"),
    NodeKind.POINTILLISM: _suffix("in the style of pointillism"),
    NodeKind.STAINED_GLASS: _suffix("as a vibrant stained glass window"),
    # Photographic
    NodeKind.VINTAGE_PHOTO: _suffix("as a faded, sepia-toned vintage photograph from the 1920s"),
    NodeKind.BLACK_AND_WHITE: _suffix("as a high-contrast black and white photograph"),
    NodeKind.LONG_EXPOSURE: _suffix("with motion blur and light trails, as a long exposure photograph"),
    NodeKind.BOKEH: _suffix("with a soft, out-of-focus background with beautiful bokeh"),
    NodeKind.HDR: _suffix("as a high-dynamic-range (HDR) image with intense detail and color"),
    NodeKind.DUOTONE: _suffix("in a two-color duotone effect, blue and yellow"),
    NodeKind.PINHOLE: _suffix("as if taken with a pinhole camera, with vignetting and soft focus"),
    NodeKind.LOMO: _suffix("as a lomography photo with saturated colors and vignetting"),
    NodeKind.TILT_SHIFT: _suffix("as a tilt-shift photo, making it look like a miniature model"),
    NodeKind.NIGHT_VISION: _suffix("as seen through green night vision goggles"),
    # Digital
    NodeKind.PIXELATE: _wrap("A pixel art version of {base}"),
    NodeKind.GLITCH: _suffix("with digital glitch effects, datamoshing, and artifacts"),
    NodeKind.KALEIDOSCOPE: _wrap("A kaleidoscopic, symmetrical version of {base}"),
    NodeKind.ASCII: _wrap("An ASCII art representation of {base}"),
    NodeKind.LOW_POLY: _wrap("A low-poly, faceted version of {base}"),
    NodeKind.HALFTONE: _suffix("using a halftone dot pattern"),
    NodeKind.ANAGLYPH: _suffix("as a red and cyan anaglyph 3D image"),
    NodeKind.SCANLINES: _suffix("with horizontal scanlines, as if on an old CRT monitor"),
    NodeKind.INVERT: _suffix("with all colors inverted"),
    NodeKind.LIQUIFY: _suffix("with a warped, liquified effect"),
    # Thematic
    NodeKind.CYBERPUNK: _suffix("in a neon-drenched, high-tech cyberpunk setting"),
    NodeKind.STEAMPUNK: _suffix("reimagined with steampunk gears, brass, and steam power"),
    NodeKind.FANTASY: _suffix("in a high-fantasy, magical setting"),
    NodeKind.SCI_FI: _suffix("in a futuristic, science-fiction setting with spaceships and aliens"),
    NodeKind.MINIMALIST: _wrap("A minimal, clean, and simple representation of {base}"),
    NodeKind.VAPORWAVE: _suffix("in a vaporwave aesthetic with pastel colors, glitches, and classical statues"),
    NodeKind.GOTHIC: _suffix("in a dark, gothic style"),
    NodeKind.ART_DECO: _suffix("in a glamorous Art Deco style"),
    NodeKind.GRUNGE: _suffix("with a gritty, textured grunge aesthetic"),
    NodeKind.HOLOGRAM: _wrap("A glowing, translucent hologram of {base}"),
    # Creative additions
    NodeKind.STICKERIZE: _suffix("as a die-cut vinyl sticker with a white border"),
    NodeKind.LEGO: _suffix("made out of Lego bricks"),
    NodeKind.CLAYMATION: _suffix("as a claymation model"),
    NodeKind.BLUEPRINT: _wrap("A technical blueprint drawing of {base}"),
    NodeKind.NEON_GLOW: _suffix("as a vibrant neon sign"),
}

# Kinds the executor dispatches without a prompt recipe
NON_RECIPE_KINDS = frozenset({
    NodeKind.SOURCE_UPLOAD,       # described by the vision model
    NodeKind.SOURCE_IMAGESCRIPT,  # compiled from ImageScript
    NodeKind.GENERATE_PODCAST,    # text generation
    NodeKind.VEO_VIDEO,           # simulated
})


def check_recipe_coverage(
    recipes: Mapping[NodeKind, Recipe],
    non_recipe: frozenset = NON_RECIPE_KINDS,
) -> List[str]:
    """Return problems with a recipe table; empty when every kind is accounted for."""
    errors = []
    for kind in NodeKind:
        if kind in recipes and kind in non_recipe:
            errors.append(f"{kind.value}: has a recipe but is also dispatched without one")
        elif kind not in recipes and kind not in non_recipe:
            errors.append(f"{kind.value}: no recipe and not declared recipe-free")
    return errors


_coverage_errors = check_recipe_coverage(DEFAULT_RECIPES)
if _coverage_errors:
    raise RuntimeError(f"Recipe table incomplete: {_coverage_errors}")


class RecipeAnomaly(BaseModel):
    """A kind that needed a recipe but had none; the base prompt was used instead."""
    kind: str
    occurred_at: datetime = Field(default_factory=datetime.utcnow)


class RecipeRegistry:
    """
    Lookup table from node kind to recipe.
    Missing recipes never raise: the anomaly is logged, recorded, and the
    base prompt passes through unchanged.
    """

    def __init__(self, recipes: Optional[Mapping[NodeKind, Recipe]] = None):
        self._recipes: Dict[NodeKind, Recipe] = dict(DEFAULT_RECIPES if recipes is None else recipes)
        self._anomalies: List[RecipeAnomaly] = []

    @property
    def anomalies(self) -> List[RecipeAnomaly]:
        return list(self._anomalies)

    def get(self, kind: NodeKind) -> Optional[Recipe]:
        return self._recipes.get(NodeKind(kind))

    def register(self, kind: NodeKind, recipe: Recipe) -> None:
        self._recipes[NodeKind(kind)] = recipe

    def kinds(self) -> List[NodeKind]:
        return list(self._recipes)

    def resolve(self, kind: NodeKind, base: str, custom: str) -> str:
        recipe = self.get(kind)
        if recipe is None:
            kind_value = NodeKind(kind).value
            logger.warning(f"[RECIPES] No prompt recipe for node kind '{kind_value}', using base prompt")
            self._anomalies.append(RecipeAnomaly(kind=kind_value))
            return base
        return recipe(base, custom)
