"""Infrastructure layer: source connectors and the command line interface."""
