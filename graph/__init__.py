"""Dependency graph model and materialization."""
