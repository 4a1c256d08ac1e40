"""Command line interface for freelancedesk."""
