"""Base class and parsing helper for request DTOs."""
from typing import Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from orderdesk.exceptions import BusinessLogicError

T = TypeVar('T', bound='RequestModel')


class RequestModel(BaseModel):
    """JSON bodies use camelCase; DTO attributes are snake_case."""

    model_config = ConfigDict(populate_by_name=True, extra='forbid', str_strip_whitespace=True)


def parse_request(model: Type[T], data) -> T:
    """
    Validate a JSON body into a DTO.

    Raises:
        BusinessLogicError: 400 with the list of field errors
    """
    if data is None:
        raise BusinessLogicError('Request body must be a JSON object')
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                'field': '.'.join(str(part) for part in err['loc']),
                'message': err['msg'],
            }
            for err in e.errors()
        ]
        first = errors[0] if errors else {'field': None, 'message': 'Invalid request'}
        raise BusinessLogicError(
            f"Invalid {first['field']}: {first['message']}" if first['field'] else first['message'],
            payload={'errors': errors}
        )
