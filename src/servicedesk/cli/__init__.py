"""CLI layer for servicedesk application."""
