"""create-webiny-project - bootstrap a new Webiny project from a template."""

__version__ = "0.1.0"
