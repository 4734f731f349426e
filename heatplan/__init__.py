"""Heat demand estimation and heating system design search."""
