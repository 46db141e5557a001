"""Pydantic schemas for the JSON API."""
