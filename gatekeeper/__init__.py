"""PR Gatekeeper: validates pull request templates and keeps PR metadata in sync."""

__version__ = "1.0.0"
