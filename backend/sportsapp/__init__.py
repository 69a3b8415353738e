"""SportsApp backend: write-path moderation and rate limiting."""
