"""
Exceptions raised by the access grant service.
"""

from typing import List, Tuple


class AccessError(Exception):
    """Base class for access grant errors."""


class ValidationError(AccessError):
    """A grant request violated one or more input constraints."""

    def __init__(self, errors: List[Tuple[str, str]]):
        self.errors = list(errors)
        detail = "; ".join(f"{name}: {message}" for name, message in self.errors)
        super().__init__(f"Invalid grant request: {detail}")

    @property
    def fields(self) -> List[str]:
        return [name for name, _ in self.errors]


class NotActiveError(AccessError):
    """Revocation attempted on a grant that is already expired or revoked."""

    def __init__(self, grant_id: str, status):
        self.grant_id = grant_id
        self.status = status
        super().__init__(f"Grant {grant_id} is not active (status: {getattr(status, 'value', status)})")


class GrantNotFoundError(AccessError, KeyError):
    def __init__(self, grant_id: str):
        self.grant_id = grant_id
        super().__init__(f"Grant {grant_id} not found")

    def __str__(self):
        return self.args[0]


class TechnicianNotFoundError(AccessError, KeyError):
    def __init__(self, technician_id: str):
        self.technician_id = technician_id
        super().__init__(f"Technician {technician_id} not found")

    def __str__(self):
        return self.args[0]
