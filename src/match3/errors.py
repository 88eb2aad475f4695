class Match3Error(Exception):
    """Base class for errors raised by the match engine."""


class MissingCollaboratorError(Match3Error, RuntimeError):
    """A required collaborator (grid, token factory) was not supplied."""

    def __init__(self, owner: str, collaborator: str):
        super().__init__(f"{owner} requires a {collaborator}")
        self.owner = owner
        self.collaborator = collaborator


class InvariantViolation(Match3Error, AssertionError):
    """Grid/token bookkeeping is inconsistent (token ownership or position drift)."""
