"""Domain exceptions raised by the service layer.

Routers translate these into HTTP responses; services never raise
HTTPException themselves.
"""


class ValidationError(ValueError):
    """Invalid input or a missing required association."""


class BatchContentionError(RuntimeError):
    """
    The batch get-or-create transaction lost a race or ran out of time.

    Not retried automatically; the caller should re-invoke.
    """


class ExportError(RuntimeError):
    """An export could not be produced. The message is user-facing."""


class PermissionDeniedError(PermissionError):
    """The caller can see the record but their role may not make this change."""
