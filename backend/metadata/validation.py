"""Record validation driven by field definitions"""
from decimal import Decimal, InvalidOperation

REQUIRED_MESSAGE = 'This field is required.'


def format_number(value):
    value = Decimal(str(value))
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return str(value.normalize())


def is_blank(value):
    return value is None or value == '' or value == []


def option_values(definition):
    values = set()
    for option in definition.value_set or []:
        values.add(str(option['value']) if isinstance(option, dict) else str(option))
    return values


def validate_value(definition, value):
    """Error messages for a single non-blank value"""
    errors = []
    field_type = definition.type

    if field_type in ('TextField', 'AddressField', 'PhoneField'):
        if definition.max_length and len(str(value)) > definition.max_length:
            errors.append(f'Ensure this field has no more than {definition.max_length} characters.')

    elif field_type == 'NumberField':
        if isinstance(value, bool):
            return ['A valid number is required.']
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ['A valid number is required.']
        if not number.is_finite():
            return ['A valid number is required.']
        if definition.min_value is not None and number < definition.min_value:
            errors.append(f'Ensure this value is greater than or equal to {format_number(definition.min_value)}.')
        if definition.max_value is not None and number > definition.max_value:
            errors.append(f'Ensure this value is less than or equal to {format_number(definition.max_value)}.')

    elif field_type == 'CheckboxField':
        if not isinstance(value, bool) and value not in ('true', 'false'):
            errors.append('Must be a valid boolean.')

    elif field_type == 'DropDownListField':
        allowed = option_values(definition)
        if allowed:
            selected = value if isinstance(value, list) else [value]
            if not definition.is_multi_select and isinstance(value, list):
                errors.append('A single value is expected.')
            for item in selected:
                if str(item) not in allowed:
                    errors.append(f'"{item}" is not a valid choice.')

    return errors


def validate_record_data(definitions, data, partial=False):
    """
    Validate a record payload against field definitions.

    Standard fields are read from ``data`` and custom fields from
    ``data['custom_fields']``. Required fields must be present on create; on a
    partial update they only fail when explicitly blanked. Returns a dict of
    ``{api_code: [messages]}``, empty when valid.
    """
    errors = {}
    custom_values = data.get('custom_fields') or {}
    if not isinstance(custom_values, dict):
        return {'custom_fields': ['Expected an object of custom field values.']}

    custom_codes = set()
    for definition in definitions:
        source = custom_values if definition.is_custom else data
        if definition.is_custom:
            custom_codes.add(definition.api_code)
        present = definition.api_code in source
        value = source.get(definition.api_code)

        if definition.required and is_blank(value) and (present or not partial):
            errors[definition.api_code] = [REQUIRED_MESSAGE]
            continue
        if is_blank(value):
            continue

        messages = validate_value(definition, value)
        if messages:
            errors[definition.api_code] = messages

    unknown = sorted(set(custom_values) - custom_codes)
    if unknown:
        errors.setdefault('custom_fields', []).append(f"Unknown custom fields: {', '.join(unknown)}")

    return errors
