from typing import Mapping

from servicedownloadable.exceptions import ValidationError


def check_required_params(required: Mapping[str, str], data: Mapping) -> None:
    """
    Raise ValidationError with the mapped message for the first field
    that is absent, None or a blank string.
    """
    for field, message in required.items():
        value = data.get(field)
        if value is None:
            raise ValidationError(message)
        if isinstance(value, str) and value.strip() == "":
            raise ValidationError(message)
