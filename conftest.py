"""Root conftest: makes the repository root importable for ecotank/tests."""
