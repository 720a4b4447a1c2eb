"""
Standard field definitions and default layouts shipped as XML.

Each ``definitions/<object_code>.xml`` file looks like::

    <objectDefinition objectCode="accounts">
      <fields>
        <field>
          <apiCode>name</apiCode>
          <label>Account Name</label>
          <type>TextField</type>
          <required>true</required>
          <maxLength>255</maxLength>
        </field>
        <field>
          ...
          <valueSet>
            <option value="Planned">Planned</option>
          </valueSet>
        </field>
      </fields>
      <layouts>
        <tableLayout name="All Accounts">
          <column>name</column>
        </tableLayout>
        <detailLayout name="Account Detail">
          <section label="Details">
            <field>name</field>
          </section>
        </detailLayout>
      </layouts>
    </objectDefinition>
"""
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from django.db import transaction

from .models import FieldDefinition, ObjectLayout
from .services import invalidate_field_cache
from .signals import suspend_cache_signals

logger = logging.getLogger(__name__)

DEFINITIONS_DIR = Path(__file__).resolve().parent / 'definitions'

NUMERIC_KEYS = (
    'maxLength', 'minValue', 'maxValue', 'precision', 'scale',
    'decimalPlaces', 'visibleLinesInEdit', 'visibleLinesInView',
    'minDigits', 'maxDigits',
)

BOOLEAN_KEYS = (
    'required', 'copyAble', 'truncate', 'percentageDisplay', 'allowSearch',
    'allowNegativeNumbers', 'onlyPositive', 'displayThousandsSeparator',
)

# XML key -> FieldDefinition attribute
MODEL_KEYS = {
    'apiCode': 'api_code',
    'label': 'label',
    'type': 'type',
    'subtype': 'subtype',
    'fieldType': 'field_type',
    'helpText': 'help_text',
    'placeHolder': 'placeholder',
    'required': 'required',
    'maxLength': 'max_length',
    'minValue': 'min_value',
    'maxValue': 'max_value',
    'decimalPlaces': 'decimal_places',
    'percentageDisplay': 'percentage_display',
    'allowSearch': 'allow_search',
    'copyAble': 'copyable',
    'defaultValue': 'default_value',
    'lookupObject': 'lookup_object_code',
    'sortOrder': 'sort_order',
}

INTEGER_ATTRIBUTES = ('max_length', 'decimal_places', 'sort_order')


def _to_number(value):
    try:
        number = float(value)
    except ValueError:
        return None
    return None if number != number else number


def _to_bool(value):
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None


def flatten_xml_metadata(element, known_field_type=None):
    """
    Flatten the simple child elements of a <field> into a typed dict.

    Numeric and boolean keys are cast, ``defaultValue`` is cast according to
    the field type (``known_field_type`` wins over the element's own <type>),
    and empty or unparseable values are left out.
    """
    flattened = {}
    field_type = known_field_type or (element.findtext('type') or '').strip() or None

    for child in element:
        if len(child):
            continue
        value = (child.text or '').strip()
        if value == '':
            continue
        key = child.tag

        if key in NUMERIC_KEYS:
            number = _to_number(value)
            if number is not None:
                flattened[key] = number
        elif key in BOOLEAN_KEYS:
            flag = _to_bool(value)
            if flag is not None:
                flattened[key] = flag
        elif key == 'defaultValue':
            if field_type == 'NumberField':
                number = _to_number(value)
                if number is not None:
                    flattened[key] = number
            elif field_type == 'CheckboxField':
                flag = _to_bool(value)
                if flag is not None:
                    flattened[key] = flag
            else:
                flattened[key] = value
        else:
            flattened[key] = value

    return flattened


def parse_value_set(element):
    value_set = element.find('valueSet')
    if value_set is None:
        return []
    options = []
    for option in value_set.findall('option'):
        label = (option.text or '').strip()
        value = option.get('value', label)
        options.append({'value': value, 'label': label or value})
    return options


def field_attributes(element, position):
    """FieldDefinition keyword arguments for one <field> element"""
    flattened = flatten_xml_metadata(element)
    attributes = {'sort_order': (position + 1) * 10, 'extra': {}}
    for key, value in flattened.items():
        attribute = MODEL_KEYS.get(key)
        if attribute is None:
            attributes['extra'][key] = value
            continue
        if attribute in INTEGER_ATTRIBUTES:
            value = int(float(value))
        attributes[attribute] = value
    attributes['value_set'] = parse_value_set(element)
    return attributes


def parse_layouts(root):
    layouts = []
    for element in root.findall('layouts/tableLayout'):
        layouts.append({
            'view_type': 'table',
            'name': element.get('name', ''),
            'definition': {'columns': [(c.text or '').strip() for c in element.findall('column')]},
        })
    for element in root.findall('layouts/detailLayout'):
        sections = []
        for section in element.findall('section'):
            sections.append({
                'label': section.get('label', ''),
                'fields': [(f.text or '').strip() for f in section.findall('field')],
            })
        layouts.append({
            'view_type': 'detail',
            'name': element.get('name', ''),
            'definition': {'sections': sections},
        })
    return layouts


def parse_definition_file(path):
    """(object_code, [field attributes], [layouts]) of one definition file"""
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ValueError(f"{path}: {e}")
    object_code = root.get('objectCode') or Path(path).stem
    fields = [field_attributes(element, i) for i, element in enumerate(root.findall('fields/field'))]
    for attributes in fields:
        if not attributes.get('api_code') or not attributes.get('type'):
            raise ValueError(f"{path}: every field needs apiCode and type")
        attributes.setdefault('label', attributes['api_code'])
    return object_code, fields, parse_layouts(root)


def sync_definition_file(path, clear=False):
    """
    Upsert the standard definitions and default layouts of one file.

    With ``clear`` the standard definitions of the object that are no longer
    in the file are deleted. Company rows are never touched.
    """
    object_code, fields, layouts = parse_definition_file(path)
    stats = {'object_code': object_code, 'created': 0, 'updated': 0, 'deleted': 0, 'layouts': 0}

    with transaction.atomic(), suspend_cache_signals():
        api_codes = []
        for attributes in fields:
            api_code = attributes.pop('api_code')
            api_codes.append(api_code)
            _, created = FieldDefinition.objects.update_or_create(
                company=None, object_code=object_code, api_code=api_code,
                defaults={**attributes, 'is_custom': False},
            )
            stats['created' if created else 'updated'] += 1

        if clear:
            stale = FieldDefinition.objects.filter(company__isnull=True, object_code=object_code).exclude(api_code__in=api_codes)
            stats['deleted'], _ = stale.delete()

        for layout in layouts:
            ObjectLayout.objects.update_or_create(
                company=None, object_code=object_code, view_type=layout['view_type'],
                defaults={'name': layout['name'], 'definition': layout['definition']},
            )
            stats['layouts'] += 1

    invalidate_field_cache(object_code)
    logger.info("Synced field definitions for %s: %s", object_code, stats)
    return stats


def sync_all_definitions(directory=DEFINITIONS_DIR, clear=False):
    return [sync_definition_file(path, clear=clear) for path in sorted(Path(directory).glob('*.xml'))]
