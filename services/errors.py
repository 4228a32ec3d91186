"""Exceptions raised by the scheduling services, each mapped to an HTTP status."""


class SchedulingError(Exception):
    """Base class; unexpected failures surface as 500."""
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class DataFormatError(SchedulingError):
    """Malformed request data."""
    status_code = 400
    default_message = 'Invalid data format'


class NotFoundError(SchedulingError):
    status_code = 404
    default_message = 'Not found'


class GroupNotFoundError(NotFoundError):
    default_message = 'Group not found'


class ScheduleNotFoundError(NotFoundError):
    default_message = 'Schedule not found'


class ProposalNotFoundError(NotFoundError):
    default_message = 'Proposal not found'


class InternalError(SchedulingError):
    """Storage or expansion failure; no partial result is returned."""
    status_code = 500
