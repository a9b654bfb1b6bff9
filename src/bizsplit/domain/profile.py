"""Profile domain service."""

import logging

from bizsplit.config import STATE_KEY
from bizsplit.domain.commands import Command, apply_command
from bizsplit.domain.entities import Profile, default_profile
from bizsplit.domain.metrics import DashboardSnapshot, build_snapshot
from bizsplit.domain.migration import dump_profile, load_profile
from bizsplit.storage.base import StateStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for loading, updating and saving the single profile."""

    def __init__(self, store: StateStore, key: str = STATE_KEY):
        """Initialize profile service.

        Args:
            store: State store instance
            key: Slot the serialized profile lives in
        """
        self.store = store
        self.key = key

    def load(self) -> Profile:
        """Load the stored profile, migrated to the current shape.

        Returns:
            The stored profile, or the default profile on first run or when
            the stored document is unreadable
        """
        return load_profile(self.store.read_state(self.key))

    def save(self, profile: Profile) -> None:
        """Overwrite the stored profile with ``profile``."""
        self.store.write_state(self.key, dump_profile(profile))

    def dispatch(self, command: Command) -> Profile:
        """Apply a command to the stored profile and save the result.

        Args:
            command: One of the commands in ``bizsplit.domain.commands``

        Returns:
            The new profile
        """
        profile = apply_command(self.load(), command)
        self.save(profile)
        logger.debug("Applied %s", type(command).__name__)
        return profile

    def snapshot(self) -> DashboardSnapshot:
        """Compute dashboard figures for the stored profile."""
        return build_snapshot(self.load())

    def reset(self) -> Profile:
        """Erase all stored data and return a fresh default profile."""
        self.store.delete_state(self.key)
        logger.info("Profile reset")
        return default_profile()
