"""LLM-backed translation of string tables."""
