"""Board fetching, parsing and the refresh loop."""
