"""HTTP surface for the canvas UI."""
