"""Blog Backend test suite."""
