"""Check plugins shipped with the package."""
