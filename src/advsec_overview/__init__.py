"""Azure DevOps Advanced Security alert overview."""

__version__ = "1.0.0"
