from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Resource conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidTransitionError(ConflictError):
    """Raised when an appointment status change is not in the transition table."""

    def __init__(self, current, target, action: str = None):
        self.current = current
        self.target = target
        self.action = action
        via = f" via '{action}'" if action else ""
        super().__init__(
            f"Cannot change appointment status from '{current.value}' "
            f"to '{target.value}'{via}"
        )


class BadRequestError(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
