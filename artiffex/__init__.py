"""Artiffex - branching image-generation pipelines and the ImageScript prompt language."""

__version__ = "1.0.0"
