"""Operation modules shared by the CLI surface."""
