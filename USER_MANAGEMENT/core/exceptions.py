from typing import Dict, List


class UserManagementError(Exception):
    pass


class ValidationError(UserManagementError):
    """Field-keyed, user-correctable input errors. Nothing was mutated."""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__(f"Validation failed for: {', '.join(errors)}")


class NotFoundError(UserManagementError):
    pass


class StorageError(UserManagementError):
    pass


class PersistenceError(UserManagementError):
    pass
