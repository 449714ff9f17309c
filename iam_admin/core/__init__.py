"""Core layer: results, errors, validation, configuration, composition root."""
