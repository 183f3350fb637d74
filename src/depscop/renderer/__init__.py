"""Output renderers for dependency graphs."""
