"""Typed exceptions raised by the service layer."""


class NotFoundError(Exception):
    """A snapshot or account does not exist, or belongs to another user.

    Callers cannot tell the two cases apart.
    """

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"{resource} not found")


class PersistenceError(Exception):
    """The database was unreachable or rejected a write.

    Nothing from the failed unit of work is left behind; the caller should
    retry the whole action.
    """

    pass
