"""
Typed failures raised by the progress core.

Callers (the HTTP layer) translate these into responses; the core itself
never logs or formats user-facing output.
"""


class ProgressError(Exception):
    """Base class for per-request, recoverable progress failures."""

    code = "progress_error"

    def __init__(self, message: str, *, module_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.module_id = module_id


class InvalidModule(ProgressError):
    code = "invalid_module"

    def __init__(self, module_id: str):
        super().__init__(f"Unknown module id: {module_id!r}", module_id=module_id)


class ModuleNotStarted(ProgressError):
    code = "module_not_started"

    def __init__(self, module_id: str):
        super().__init__(f"Module {module_id!r} has not been started", module_id=module_id)


class DuplicateAnswer(ProgressError):
    code = "duplicate_answer"

    def __init__(self, module_id: str, question_index: int):
        super().__init__(
            f"Question {question_index} of module {module_id!r} was already answered",
            module_id=module_id,
        )
        self.question_index = question_index


class ModuleAlreadyCompleted(ProgressError):
    code = "module_already_completed"

    def __init__(self, module_id: str):
        super().__init__(
            f"Module {module_id!r} is already completed; reset it to start a new attempt",
            module_id=module_id,
        )
