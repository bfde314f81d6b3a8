# errors.py
# Errors raised by the evaluation workflow and the remote store


class EvaluationHubError(Exception):
    """Base class for errors shown to the user."""

    status_code = 400

    def __init__(self, message, title=None):
        super().__init__(message)
        self.message = message
        self.title = title or 'Error'

    def to_dict(self):
        return {'error': type(self).__name__, 'title': self.title, 'message': self.message}


class InvalidSubmission(EvaluationHubError):
    status_code = 400


class NotFound(EvaluationHubError):
    status_code = 404


class EventClosed(EvaluationHubError):
    status_code = 409

    def __init__(self, event_id):
        super().__init__('Deadline passed! This event no longer accepts evaluations.', title='Deadline passed')
        self.event_id = event_id


class RemoteStoreError(Exception):
    """A remote store request failed (transport error, timeout or non-2xx response)."""
