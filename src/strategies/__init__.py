"""Signal detection strategies."""
