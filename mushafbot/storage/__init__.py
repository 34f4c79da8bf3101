"""Persistent state for mushafbot."""

from mushafbot.storage.id_set import PersistentIdSet, SeenUsers, TrackedChats

__all__ = ["PersistentIdSet", "SeenUsers", "TrackedChats"]
