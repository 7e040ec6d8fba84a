"""Reconstruct last(1)-style login history from wtmp records."""
