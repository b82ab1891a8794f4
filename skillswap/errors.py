from pydantic import ValidationError as PydanticValidationError


class SkillSwapError(Exception):
    """Base error carrying the HTTP status it is rendered with."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(SkillSwapError):
    status_code = 400


class InvalidTransition(ValidationError):
    """The swap's current status does not lead to the requested one."""


class Unauthenticated(SkillSwapError):
    status_code = 401


class InvalidCredential(Unauthenticated):
    status_code = 403


class Forbidden(SkillSwapError):
    status_code = 403


class NotFound(SkillSwapError):
    status_code = 404


class Conflict(SkillSwapError):
    status_code = 409


class StoreFailure(SkillSwapError):
    status_code = 500


def parse_payload(model, data):
    """Validate ``data`` against a pydantic model, raising ValidationError."""
    if data is None:
        raise ValidationError('Request body must be a JSON object')
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = '.'.join(str(part) for part in first['loc'])
        message = f"{field}: {first['msg']}" if field else first['msg']
        raise ValidationError(message) from e
