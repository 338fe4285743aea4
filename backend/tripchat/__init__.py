"""TripChat backend: accounts, trip groups and live group messaging."""
