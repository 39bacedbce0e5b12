"""Failures raised at the persistence boundary (not part of the progress core)."""


class UserNotFound(Exception):
    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class ProgressWriteConflict(Exception):
    """Concurrent writers kept invalidating our read of the user row."""

    def __init__(self, user_id: int, attempts: int):
        super().__init__(f"Gave up writing progress for user {user_id} after {attempts} attempts")
        self.user_id = user_id
        self.attempts = attempts
