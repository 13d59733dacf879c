"""Query compilation and preview rendering."""
