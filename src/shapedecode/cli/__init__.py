"""Command line interface for shapedecode."""
