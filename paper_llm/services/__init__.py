"""Application services built on top of the provider layer."""
