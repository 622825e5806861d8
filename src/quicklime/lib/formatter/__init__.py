"""printf-style format command parsing and validation."""
