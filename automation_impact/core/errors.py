"""Exception types raised by the normalization and metrics pipeline."""


class AutomationImpactError(Exception):
    """Base class for errors raised by this package."""


class RowValidationError(AutomationImpactError, ValueError):
    """A single raw row failed schema or date validation.

    Normalizers catch this per row and count the row as dropped; it never
    escapes a normalizer.
    """


class ProjectNotFoundError(AutomationImpactError, LookupError):
    """The requested project identifier is not known to the registry."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Unknown project '{project_id}'")
        self.project_id = project_id


class InvalidRangeError(AutomationImpactError, ValueError):
    """A requested date window is structurally invalid."""
