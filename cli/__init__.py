"""Command line entry point for running discount functions."""
