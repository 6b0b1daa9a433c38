"""Adapters binding the save pipeline to pydantic and HTTP."""
