"""
Test suite for the field metadata module
Tests: pluralization, form values, XML definitions, record validation,
field/layout endpoints and the definition loader command
"""
import tempfile
import xml.etree.ElementTree as ET
from decimal import Decimal
from io import StringIO
from pathlib import Path

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.metadata.form_utils import (
    get_default_value, build_default_form_values, transform_field_value, transform_record_to_form_values
)
from backend.metadata.models import FieldDefinition, ObjectLayout
from backend.metadata.pluralize import to_singular, to_plural, get_singular_label, get_plural_label
from backend.metadata.services import get_field_definitions, get_field_type_map, resolve_layout
from backend.metadata.exceptions import LayoutNotFound
from backend.metadata.validation import validate_record_data
from backend.metadata.xml_loader import flatten_xml_metadata, parse_definition_file, sync_definition_file


class PluralizeTests(SimpleTestCase):
    """Test object code singular/plural conversion"""

    def test_to_singular(self):
        self.assertEqual(to_singular('assets'), 'asset')
        self.assertEqual(to_singular('opportunities'), 'opportunity')
        self.assertEqual(to_singular('boxes'), 'box')
        self.assertEqual(to_singular('types'), 'type')
        self.assertEqual(to_singular('people'), 'person')
        self.assertEqual(to_singular('Quotes'), 'quote')

    def test_to_plural(self):
        self.assertEqual(to_plural('asset'), 'assets')
        self.assertEqual(to_plural('opportunity'), 'opportunities')
        self.assertEqual(to_plural('day'), 'days')
        self.assertEqual(to_plural('box'), 'boxes')
        self.assertEqual(to_plural('child'), 'children')

    def test_labels(self):
        self.assertEqual(get_singular_label('accounts'), 'Account')
        self.assertEqual(get_plural_label('accounts'), 'Accounts')


class FormValueTests(SimpleTestCase):
    """Test conversion between records and form values"""

    def test_default_values_by_type(self):
        self.assertEqual(get_default_value({'type': 'TextField'}), '')
        self.assertEqual(get_default_value({'type': 'DropDownListField'}), '')
        self.assertEqual(get_default_value({'type': 'DropDownListField', 'is_multi_select': True}), [])
        self.assertIsNone(get_default_value({'type': 'NumberField'}))
        self.assertIsNone(get_default_value({'type': 'DateTimeField'}))
        self.assertIs(get_default_value({'type': 'CheckboxField'}), False)
        self.assertEqual(get_default_value({'type': 'SomethingElse'}), '')

    def test_additional_defaults_override(self):
        field_map = {'name': {'type': 'TextField'}, 'quantity': {'type': 'NumberField'}}
        self.assertEqual(build_default_form_values(field_map, {'quantity': 1}), {'name': '', 'quantity': 1})

    def test_number_values(self):
        info = {'type': 'NumberField'}
        self.assertEqual(transform_field_value('12.50000', info), 12.5)
        self.assertEqual(transform_field_value(Decimal('3'), info), 3.0)
        self.assertIsNone(transform_field_value('abc', info))
        self.assertIsNone(transform_field_value('NaN', info))
        self.assertIsNone(transform_field_value(True, info))

    def test_multi_select_values(self):
        info = {'type': 'DropDownListField', 'is_multi_select': True}
        self.assertEqual(transform_field_value('A', info), ['A'])
        self.assertEqual(transform_field_value(['A', 'B'], info), ['A', 'B'])
        self.assertEqual(transform_field_value('', info), [])

    def test_record_keys_without_definition_are_inferred(self):
        values = transform_record_to_form_values(
            {'name': None, 'total': '42', 'note': 'hello'}, {'name': {'type': 'TextField'}}
        )
        self.assertEqual(values, {'name': '', 'total': 42.0, 'note': 'hello'})

    def test_missing_record_yields_defaults(self):
        values = transform_record_to_form_values(None, {'done': {'type': 'CheckboxField'}})
        self.assertEqual(values, {'done': False})


class XmlDefinitionTests(TestCase):
    """Test XML flattening and definition file loading"""

    XML = """<?xml version="1.0"?>
<objectDefinition objectCode="gadgets">
  <fields>
    <field>
      <apiCode>name</apiCode>
      <label>Name</label>
      <type>TextField</type>
      <required>true</required>
      <maxLength>80</maxLength>
      <visibleLinesInEdit>3</visibleLinesInEdit>
    </field>
    <field>
      <apiCode>size</apiCode>
      <type>DropDownListField</type>
      <defaultValue>M</defaultValue>
      <valueSet>
        <option value="S">Small</option>
        <option value="M">Medium</option>
      </valueSet>
    </field>
  </fields>
  <layouts>
    <tableLayout name="All Gadgets"><column>name</column><column>size</column></tableLayout>
    <detailLayout name="Gadget">
      <section label="Main"><field>name</field><field>size</field></section>
    </detailLayout>
  </layouts>
</objectDefinition>
"""

    def setUp(self):
        cache.clear()
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / 'gadgets.xml'
        self.path.write_text(self.XML)

    def tearDown(self):
        self.tmp.cleanup()

    def test_flatten_casts_values(self):
        element = ET.fromstring(
            '<field><type>NumberField</type><maxLength>10</maxLength><required>true</required>'
            '<defaultValue>2.5</defaultValue><label> </label><allowSearch>maybe</allowSearch></field>'
        )
        self.assertEqual(
            flatten_xml_metadata(element),
            {'type': 'NumberField', 'maxLength': 10.0, 'required': True, 'defaultValue': 2.5},
        )

    def test_known_field_type_wins(self):
        element = ET.fromstring('<field><type>TextField</type><defaultValue>true</defaultValue></field>')
        self.assertIs(flatten_xml_metadata(element, known_field_type='CheckboxField')['defaultValue'], True)

    def test_parse_definition_file(self):
        object_code, fields, layouts = parse_definition_file(self.path)
        self.assertEqual(object_code, 'gadgets')
        self.assertEqual(fields[0]['max_length'], 80)
        self.assertEqual(fields[0]['extra'], {'visibleLinesInEdit': 3.0})
        self.assertEqual(fields[1]['label'], 'size')
        self.assertEqual(fields[1]['sort_order'], 20)
        self.assertEqual(fields[1]['value_set'], [{'value': 'S', 'label': 'Small'}, {'value': 'M', 'label': 'Medium'}])
        self.assertEqual(layouts[0]['definition'], {'columns': ['name', 'size']})
        self.assertEqual(layouts[1]['definition'], {'sections': [{'label': 'Main', 'fields': ['name', 'size']}]})

    def test_malformed_file_raises_value_error(self):
        self.path.write_text('<objectDefinition>')
        with self.assertRaises(ValueError):
            parse_definition_file(self.path)

    def test_sync_is_idempotent_and_clears_stale(self):
        FieldDefinition.objects.create(object_code='gadgets', api_code='legacy', label='Legacy', type='TextField')
        company = TestDataFactory.create_company()
        FieldDefinition.objects.create(
            object_code='gadgets', api_code='colour', label='Colour', type='TextField', company=company, is_custom=True
        )
        stats = sync_definition_file(self.path, clear=True)
        self.assertEqual((stats['created'], stats['deleted'], stats['layouts']), (2, 1, 2))
        stats = sync_definition_file(self.path)
        self.assertEqual((stats['created'], stats['updated']), (0, 2))
        self.assertEqual(
            sorted(FieldDefinition.objects.filter(object_code='gadgets').values_list('api_code', flat=True)),
            ['colour', 'name', 'size'],
        )
        self.assertEqual(ObjectLayout.objects.filter(object_code='gadgets', company__isnull=True).count(), 2)


class LoadFieldDefinitionsCommandTests(TestCase):
    """Test the load_field_definitions management command"""

    def setUp(self):
        cache.clear()

    def test_loads_shipped_definitions(self):
        out = StringIO()
        call_command('load_field_definitions', stdout=out)
        self.assertIn('Loaded definitions for 4 objects', out.getvalue())
        name = FieldDefinition.objects.get(object_code='accounts', api_code='name', company__isnull=True)
        self.assertTrue(name.required)
        self.assertEqual(name.max_length, 255)
        quantity = FieldDefinition.objects.get(object_code='assets', api_code='quantity')
        self.assertEqual(quantity.default_value, 1)
        for object_code in ('accounts', 'assets', 'products', 'quotes'):
            resolve_layout(object_code, 'table')
            resolve_layout(object_code, 'detail')

    def test_missing_directory(self):
        with self.assertRaises(CommandError):
            call_command('load_field_definitions', directory='/nonexistent/definitions', stdout=StringIO())


class ValidationTests(SimpleTestCase):
    """Test record validation against field definitions"""

    def definition(self, api_code, type='TextField', **attrs):
        return FieldDefinition(object_code='assets', api_code=api_code, label=api_code, type=type, **attrs)

    def test_required(self):
        definitions = [self.definition('name', required=True)]
        self.assertEqual(validate_record_data(definitions, {}), {'name': ['This field is required.']})
        self.assertEqual(validate_record_data(definitions, {}, partial=True), {})
        self.assertEqual(validate_record_data(definitions, {'name': ''}, partial=True), {'name': ['This field is required.']})

    def test_max_length(self):
        errors = validate_record_data([self.definition('code', max_length=3)], {'code': 'ABCD'})
        self.assertEqual(errors, {'code': ['Ensure this field has no more than 3 characters.']})

    def test_number_range(self):
        definitions = [self.definition('qty', 'NumberField', min_value=Decimal('1'), max_value=Decimal('10'))]
        self.assertEqual(validate_record_data(definitions, {'qty': '5'}), {})
        self.assertEqual(
            validate_record_data(definitions, {'qty': 0}),
            {'qty': ['Ensure this value is greater than or equal to 1.']},
        )
        self.assertEqual(
            validate_record_data(definitions, {'qty': '10.5'}),
            {'qty': ['Ensure this value is less than or equal to 10.']},
        )
        self.assertEqual(validate_record_data(definitions, {'qty': 'many'}), {'qty': ['A valid number is required.']})

    def test_checkbox(self):
        definitions = [self.definition('done', 'CheckboxField')]
        self.assertEqual(validate_record_data(definitions, {'done': 'false'}), {})
        self.assertEqual(validate_record_data(definitions, {'done': 'yes'}), {'done': ['Must be a valid boolean.']})

    def test_dropdown(self):
        value_set = [{'value': 'A', 'label': 'A'}, {'value': 'B', 'label': 'B'}]
        single = [self.definition('grade', 'DropDownListField', value_set=value_set)]
        self.assertEqual(validate_record_data(single, {'grade': 'C'}), {'grade': ['"C" is not a valid choice.']})
        self.assertEqual(validate_record_data(single, {'grade': ['A']}), {'grade': ['A single value is expected.']})
        multi = [self.definition('grades', 'DropDownListField', value_set=value_set, field_type='multiSelect')]
        self.assertEqual(validate_record_data(multi, {'grades': ['A', 'B']}), {})

    def test_custom_fields(self):
        definitions = [self.definition('tier', is_custom=True, required=True)]
        self.assertEqual(validate_record_data(definitions, {'custom_fields': {'tier': 'Gold'}}), {})
        self.assertEqual(
            validate_record_data(definitions, {'custom_fields': {'tier': 'Gold', 'x': 1, 'a': 2}}),
            {'custom_fields': ['Unknown custom fields: a, x']},
        )
        self.assertEqual(validate_record_data(definitions, {}), {'tier': ['This field is required.']})


class FieldMetadataServiceTests(TestCase):
    """Test definition merging and the cached field type map"""

    def setUp(self):
        cache.clear()
        self.company = TestDataFactory.create_company()

    def test_company_row_overrides_standard(self):
        TestDataFactory.create_field_definition('assets', 'name', label='Name', sort_order=10)
        TestDataFactory.create_field_definition('assets', 'name', label='Asset Title', company=self.company, sort_order=10)
        other = TestDataFactory.create_company()
        self.assertEqual([d.label for d in get_field_definitions('assets', self.company.id)], ['Asset Title'])
        self.assertEqual([d.label for d in get_field_definitions('assets', other.id)], ['Name'])

    def test_type_map_invalidated_on_change(self):
        definition = TestDataFactory.create_field_definition('assets', 'quantity', type='TextField')
        self.assertEqual(get_field_type_map('assets', self.company.id)['quantity']['type'], 'TextField')
        definition.type = 'NumberField'
        definition.save()
        self.assertEqual(get_field_type_map('assets', self.company.id)['quantity']['type'], 'NumberField')
        definition.delete()
        self.assertEqual(get_field_type_map('assets', self.company.id), {})

    def test_layout_not_found(self):
        with self.assertRaises(LayoutNotFound):
            resolve_layout('assets', 'detail', self.company.id)


class ObjectFieldAPITests(TestCase):
    """Test field definition endpoints"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_user(is_company_admin=True)
        self.company = self.admin.company
        self.member = TestDataFactory.create_user(company=self.company)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        TestDataFactory.create_field_definition('accounts', 'name', required=True, sort_order=10)
        TestDataFactory.create_field_definition(
            'accounts', 'industry', type='DropDownListField', sort_order=20,
            value_set=[{'value': 'Retail', 'label': 'Retail'}],
        )

    def test_list_fields(self):
        response = self.client.get('/api/v1/object-fields/accounts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([f['api_code'] for f in response.data], ['name', 'industry'])

    def test_unknown_object(self):
        response = self.client.get('/api/v1/object-fields/spaceships/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_field_types(self):
        response = self.client.get('/api/v1/object-fields/accounts/types/')
        self.assertEqual(response.data['industry']['type'], 'DropDownListField')
        self.assertFalse(response.data['industry']['is_multi_select'])

    def test_field_defaults(self):
        response = self.client.get('/api/v1/object-fields/accounts/defaults/')
        self.assertEqual(response.data, {'name': '', 'industry': ''})

    def test_create_custom_field(self):
        response = self.client.post('/api/v1/object-fields/accounts/', {
            'api_code': 'loyalty_tier', 'label': 'Loyalty Tier', 'type': 'TextField', 'allow_search': True,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['is_custom'])
        self.assertEqual(response.data['company'], self.company.id)

    def test_create_custom_field_requires_admin(self):
        self.client.authenticate_user(self.member)
        response = self.client.post(
            '/api/v1/object-fields/accounts/', {'api_code': 'tier', 'label': 'Tier', 'type': 'TextField'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_duplicate_and_invalid_api_code(self):
        response = self.client.post(
            '/api/v1/object-fields/accounts/', {'api_code': 'name', 'label': 'Name', 'type': 'TextField'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(
            '/api/v1/object-fields/accounts/', {'api_code': 'Bad-Code', 'label': 'X', 'type': 'TextField'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('api_code', response.data)

    def test_dropdown_needs_options(self):
        response = self.client.post(
            '/api/v1/object-fields/accounts/', {'api_code': 'tier', 'label': 'Tier', 'type': 'DropDownListField'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('value_set', response.data)

    def test_patch_standard_field_creates_override(self):
        response = self.client.patch('/api/v1/object-fields/accounts/name/', {'label': 'Customer'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company'], self.company.id)
        standard = FieldDefinition.objects.get(object_code='accounts', api_code='name', company__isnull=True)
        self.assertNotEqual(standard.label, 'Customer')
        self.assertEqual(FieldDefinition.objects.filter(object_code='accounts', api_code='name').count(), 2)

    def test_type_cannot_change(self):
        response = self.client.patch('/api/v1/object-fields/accounts/name/', {'type': 'NumberField'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'API code and type cannot be changed')

    def test_delete_standard_field_refused(self):
        response = self.client.delete('/api/v1/object-fields/accounts/name/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Standard fields cannot be deleted')

    def test_delete_custom_field(self):
        TestDataFactory.create_field_definition('accounts', 'tier', company=self.company, is_custom=True)
        response = self.client.delete('/api/v1/object-fields/accounts/tier/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_field_not_found(self):
        response = self.client.get('/api/v1/object-fields/accounts/nothing/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Field not found')


class LayoutAPITests(TestCase):
    """Test layout endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(is_company_admin=True)
        self.company = self.admin.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.default_detail = TestDataFactory.create_layout('accounts', 'detail')

    def test_resolve_default(self):
        response = self.client.get('/api/v1/layouts/accounts/detail/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_default'])

    def test_resolve_missing(self):
        response = self.client.get('/api/v1/layouts/accounts/table/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_company_layout(self):
        response = self.client.post('/api/v1/layouts/', {
            'object_code': 'accounts', 'view_type': 'table', 'name': 'Mine',
            'definition': {'columns': ['name', 'email']},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['is_default'])
        response = self.client.get('/api/v1/layouts/accounts/table/')
        self.assertEqual(response.data['name'], 'Mine')

    def test_duplicate_company_layout(self):
        TestDataFactory.create_layout('accounts', 'table', company=self.company)
        response = self.client.post('/api/v1/layouts/', {
            'object_code': 'accounts', 'view_type': 'table', 'name': 'Again', 'definition': {'columns': ['name']},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_definition(self):
        response = self.client.post('/api/v1/layouts/', {
            'object_code': 'accounts', 'view_type': 'detail', 'name': 'Bad', 'definition': {'columns': ['name']},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_default_layout_read_only(self):
        response = self.client.patch(f'/api/v1/layouts/{self.default_detail.id}/', {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.delete(f'/api/v1/layouts/{self.default_detail.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_and_delete_company_layout(self):
        layout = TestDataFactory.create_layout('accounts', 'detail', company=self.company)
        response = self.client.patch(f'/api/v1/layouts/{layout.id}/', {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Renamed')
        response = self.client.delete(f'/api/v1/layouts/{layout.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_other_company_layout_hidden(self):
        stranger = TestDataFactory.create_user()
        layout = TestDataFactory.create_layout('accounts', 'table', company=stranger.company)
        response = self.client.get(f'/api/v1/layouts/{layout.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
