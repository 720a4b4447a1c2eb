"""Conversion between stored records and form values driven by the field type map"""
from decimal import Decimal, InvalidOperation

TEXT_TYPES = ('TextField', 'LookupField', 'AddressField', 'PhoneField')


def get_default_value(field_info):
    """Empty form value for a field of the given type"""
    field_type = field_info.get('type')
    if field_type == 'DropDownListField' and field_info.get('is_multi_select'):
        return []
    if field_type in TEXT_TYPES or field_type == 'DropDownListField':
        return ''
    if field_type in ('NumberField', 'DateTimeField'):
        return None
    if field_type == 'CheckboxField':
        return False
    return ''


def build_default_form_values(field_type_map, additional_defaults=None):
    defaults = {api_code: get_default_value(info) for api_code, info in field_type_map.items()}
    defaults.update(additional_defaults or {})
    return defaults


def _parse_number(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except (InvalidOperation, ValueError):
            return None
        return None if number.is_nan() else float(number)
    return None


def transform_field_value(value, field_info):
    """Convert a stored value into the form value of its field type"""
    if value is None:
        return get_default_value(field_info)

    field_type = field_info.get('type')
    if field_type == 'NumberField':
        return _parse_number(value)
    if field_type == 'DateTimeField':
        return value or None
    if field_type in ('TextField', 'LookupField'):
        return value or ''
    if field_type == 'DropDownListField':
        if field_info.get('is_multi_select'):
            if isinstance(value, list):
                return value
            if isinstance(value, str) and value:
                return [value]
            return []
        return value or ''
    if field_type == 'CheckboxField':
        return bool(value)
    return value


def transform_value_by_inference(value):
    """Conversion for record keys that have no field definition"""
    if value is None:
        return None
    if isinstance(value, str) and value.strip():
        number = _parse_number(value)
        if number is not None:
            return number
    return value


def transform_record_to_form_values(record, field_type_map, additional_defaults=None):
    """
    Form values for an existing record.

    Known fields are converted by their type; any other key of the record is
    converted by inference. ``additional_defaults`` override both. A missing
    record yields the default form values.
    """
    if not record:
        return build_default_form_values(field_type_map, additional_defaults)

    form_values = {}
    for api_code, field_info in field_type_map.items():
        form_values[api_code] = transform_field_value(record.get(api_code), field_info)

    for key, value in record.items():
        if key not in form_values:
            form_values[key] = transform_value_by_inference(value)

    form_values.update(additional_defaults or {})
    return form_values
