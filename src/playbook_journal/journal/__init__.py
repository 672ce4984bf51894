"""Trade journal: what gets written onto a trade record at save time.

SetupSnapshot    Frozen check-state, score and grade of one trade
freeze_setup     Score once against the current playbook and freeze
"""

from .snapshot import SetupSnapshot, freeze_setup

__all__ = [
    "SetupSnapshot",
    "freeze_setup",
]
