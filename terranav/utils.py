from decimal import Decimal
from flask import request
from markupsafe import escape
from pydantic import ValidationError as PydanticValidationError
from werkzeug.routing import IntegerConverter
import logging
import nh3

from terranav.errors import ValidationError
from terranav.models import PriceType

logger = logging.getLogger(__name__)

ALLOWED_TAGS = {'b', 'i', 'em', 'strong', 'a', 'p', 'br', 'ul', 'ol', 'li'}
ALLOWED_ATTRIBUTES = {'a': {'href'}}
ALLOWED_URL_SCHEMES = {'http', 'https', 'mailto'}

# Largest value an SQLite INTEGER column can hold
MAX_DB_INT = 2 ** 63 - 1


def sanitize_html(content):
    if content is None:
        return None
    return nh3.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
    )


def escape_text(value):
    if value is None:
        return None
    return str(escape(value))


def request_payload():
    """Body of a JSON or form request as a plain dict.

    Empty form fields are dropped so optional fields stay unset.
    """
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')
        return data
    return {k: v for k, v in request.form.items() if v != ''}


def parse_payload(schema, data):
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        errors = []
        for err in exc.errors():
            field = '.'.join(str(part) for part in err['loc']) or None
            errors.append({'field': field, 'message': err['msg']})
        raise ValidationError(errors=errors)


def int_arg(name, default=None, minimum=None, maximum=MAX_DB_INT):
    """Integer query argument; a non-numeric value is a validation error."""
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError.for_field(name, 'Must be an integer')
    if minimum is not None and value < minimum:
        raise ValidationError.for_field(
            name, f'Must be greater than or equal to {minimum}')
    if maximum is not None and value > maximum:
        raise ValidationError.for_field(
            name, f'Must be less than or equal to {maximum}')
    return value


def float_arg(name):
    raw = request.args.get(name)
    if raw is None or raw == '':
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValidationError.for_field(name, 'Must be a number')


def format_price(price_type, price):
    # A stored price on a free listing is ignored
    if price_type == PriceType.FREE.value:
        return 'Free'
    if price is None:
        return 'Contact for price'
    amount = Decimal(price).quantize(Decimal('0.01'))
    if price_type == PriceType.NEGOTIABLE.value:
        return f'${amount} (Negotiable)'
    return f'${amount}'


class DatabaseIdConverter(IntegerConverter):
    """``<int:...>`` URL segment; ids beyond the column range never match."""

    def __init__(self, map, fixed_digits=0, min=None, max=MAX_DB_INT,
                 signed=False):
        super().__init__(map, fixed_digits=fixed_digits, min=min, max=max,
                         signed=signed)
