"""Maintenance commands, run with `python -m app.scripts.<name>`."""
