"""Error taxonomy shared by services, adapters and the HTTP layer."""


class CalorieTrackerError(Exception):
    """Base class for all application errors."""


class LogValidationError(CalorieTrackerError):
    """A log payload was rejected before anything was written."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = field_errors
        details = ", ".join(f"{name}: {reason}" for name, reason in field_errors.items())
        super().__init__(f"Invalid log entry ({details})")


class StorageError(CalorieTrackerError):
    """The embedded store failed to complete an operation."""


class CatalogInitializationError(StorageError):
    """Schema migration or seeding failed; the catalog is unusable."""


class FoodNotFoundError(CalorieTrackerError):
    """A referenced food or log does not exist."""
