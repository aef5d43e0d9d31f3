"""Adapt AI agent blueprints to tool layouts and report on project constitution docs."""

__version__ = "0.2.2"