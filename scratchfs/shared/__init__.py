"""Configuration shared by the scratchfs helpers."""
