"""HTTP surface for the draft engine."""
