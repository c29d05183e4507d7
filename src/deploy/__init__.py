"""Deploy orchestration: traversal, redirects, invalidation decision."""
