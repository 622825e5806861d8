"""Translation templates: compilation, diagnostics and language files."""
