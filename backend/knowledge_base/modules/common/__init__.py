"""Shared exceptions, schemas and error mapping."""
