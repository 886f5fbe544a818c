"""PadGroups - groups of users and pads over a key-value store.

Groups bind administrators, invited users and pads under one visibility
policy. Each referenced user keeps the ids of its groups in its own
record; PadGroups keeps that back-reference in sync.
"""

__version__ = "0.1.0"
