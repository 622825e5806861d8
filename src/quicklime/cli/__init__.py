"""Cyclopts command line surface."""
