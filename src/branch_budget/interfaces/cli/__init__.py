"""Command line interface (``branch-budget``)."""
