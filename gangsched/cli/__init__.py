"""Command line interface for gangsched."""
