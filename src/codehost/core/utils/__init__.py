"""Shared utilities for codehost core modules."""
