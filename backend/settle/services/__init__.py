"""Services Layer — persistence and orchestration around the pure core."""
