"""yamltools: parse, lint, format, and convert a practical YAML subset."""

__version__ = "0.1.0"
