"""CLI module for mushafbot."""
