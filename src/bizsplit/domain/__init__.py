"""Domain layer for bizsplit application."""

from bizsplit.domain.profile import ProfileService
from bizsplit.domain.commands import apply_command
from bizsplit.domain.metrics import build_snapshot
from bizsplit.domain.migration import load_profile, migrate_document

__all__ = [
    "ProfileService",
    "apply_command",
    "build_snapshot",
    "load_profile",
    "migrate_document",
]
