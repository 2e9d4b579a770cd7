"""Archive discovery, extraction, and the publish pipeline."""
