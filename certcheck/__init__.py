"""Certificate directory validation against a trust authority."""
