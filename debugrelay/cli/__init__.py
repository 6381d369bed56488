"""CLI module for debugrelay."""
