"""Data model: command tree, enums, cursor and output geometry, settings, schema."""
