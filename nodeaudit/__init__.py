"""nodeaudit — rebuild a project's locked dependency tree and audit it."""

__version__ = "0.1.0"
