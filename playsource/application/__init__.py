"""Application layer: use cases coordinating extractor plugins."""
