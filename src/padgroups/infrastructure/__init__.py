"""Infrastructure layer for PadGroups."""
