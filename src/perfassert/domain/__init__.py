"""Domain types and ports for perfassert."""
