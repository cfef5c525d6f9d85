"""Recipe Registry - prompt transformations and display titles per node kind."""
from .registry import (
    Recipe, RecipeRegistry, RecipeAnomaly, DEFAULT_RECIPES, NON_RECIPE_KINDS, check_recipe_coverage,
)
from .catalog import NODE_TITLES, KIND_CATEGORIES, list_kinds

__all__ = [
    "Recipe",
    "RecipeRegistry",
    "RecipeAnomaly",
    "DEFAULT_RECIPES",
    "NON_RECIPE_KINDS",
    "check_recipe_coverage",
    "NODE_TITLES",
    "KIND_CATEGORIES",
    "list_kinds",
]
