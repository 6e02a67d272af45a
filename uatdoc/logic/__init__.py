"""Framework-independent generation logic."""
