"""Fact, action and parameter definitions (the symbol table)."""
