"""playsource - extractor plugins resolving music sources into playable songs."""
