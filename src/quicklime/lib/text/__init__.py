"""Styled text: style model and run-length buffer."""
