"""Weight Tracker Bot."""
