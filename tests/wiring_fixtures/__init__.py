"""Importable classes and symbol builders shared by the test-suite."""
