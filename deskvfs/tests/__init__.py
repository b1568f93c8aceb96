"""deskvfs test suite."""
