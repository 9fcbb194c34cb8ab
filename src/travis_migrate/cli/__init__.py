"""Command line interface for Travis CI Migration Tool."""
