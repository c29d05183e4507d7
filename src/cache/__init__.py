"""Deploy cache backends."""
