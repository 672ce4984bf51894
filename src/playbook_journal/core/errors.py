"""Custom exception hierarchy for the trading journal."""


class JournalError(Exception):
    """Base exception for all trading journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


class RubricValidationError(ConfigError):
    """A playbook rubric failed validation and cannot be saved or used."""

    def __init__(self, error: str, playbook_id: str = ""):
        self.error = error
        self.playbook_id = playbook_id
        prefix = f"Rubric [{playbook_id}]" if playbook_id else "Rubric"
        super().__init__(f"{prefix}: {error}")


# --- Data ---
class PlaybookDataError(JournalError):
    """Playbook definition could not be read or parsed."""
