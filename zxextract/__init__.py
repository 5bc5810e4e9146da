"""Circuit extraction from graph-like ZX-diagrams."""
