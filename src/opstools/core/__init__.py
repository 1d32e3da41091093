"""Core building blocks shared by every ops-tools feature."""
