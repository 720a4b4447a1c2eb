"""
Test suite for the setup module
Tests: role hierarchy, role assignments, releases, translations,
setting masters and company settings rules
"""
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.setup.models import (
    CompanyRole, UserRoleAssignment, Release, Translation,
    CompanySettingMasterDomain, CompanySettingMasterFunctionality, CompanySettingsMaster, CompanySetting
)
from backend.setup.services import creates_cycle, role_tree, initialize_company_settings


class CompanyRoleTests(TestCase):
    """Test the company role hierarchy"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(is_company_admin=True)
        self.company = self.admin.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.ceo = CompanyRole.objects.create(name='CEO', company=self.company)
        self.sales = CompanyRole.objects.create(name='Sales', parent_company_role=self.ceo, company=self.company)
        self.rep = CompanyRole.objects.create(name='Rep', parent_company_role=self.sales, company=self.company)

    def test_creates_cycle(self):
        self.assertTrue(creates_cycle(self.ceo, self.rep))
        self.assertTrue(creates_cycle(self.ceo, self.ceo))
        self.assertFalse(creates_cycle(self.rep, self.ceo))
        self.assertFalse(creates_cycle(None, self.ceo))

    def test_role_tree(self):
        CompanyRole.objects.create(name='Another Root', company=self.company)
        tree = role_tree(self.company.id)
        self.assertEqual([node['name'] for node in tree], ['Another Root', 'CEO'])
        self.assertEqual(tree[1]['children'][0]['name'], 'Sales')
        self.assertEqual(tree[1]['children'][0]['children'][0]['name'], 'Rep')

    def test_tree_endpoint(self):
        response = self.client.get('/api/v1/company-roles/tree/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['id'], self.ceo.id)

    def test_create_role(self):
        response = self.client.post(
            '/api/v1/company-roles/', {'name': ' Support ', 'parent_company_role': self.ceo.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Support')
        self.assertEqual(response.data['parent_company_role_name'], 'CEO')

    def test_member_cannot_create_role(self):
        self.client.authenticate_user(TestDataFactory.create_user(company=self.company))
        response = self.client.post('/api/v1/company-roles/', {'name': 'Support'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cycle_rejected(self):
        response = self.client.patch(
            f'/api/v1/company-roles/{self.ceo.id}/', {'parent_company_role': self.rep.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data['errors']['parent_company_role'],
            ['Cannot create circular reference in company role hierarchy'],
        )

    def test_parent_from_other_company_rejected(self):
        foreign = CompanyRole.objects.create(name='Foreign', company=TestDataFactory.create_company())
        response = self.client.post(
            '/api/v1/company-roles/', {'name': 'X', 'parent_company_role': foreign.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_guard(self):
        response = self.client.delete(f'/api/v1/company-roles/{self.sales.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        UserRoleAssignment.objects.create(user=self.admin, company_role=self.rep)
        response = self.client.delete(f'/api/v1/company-roles/{self.rep.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_leaf_role(self):
        response = self.client.delete(f'/api/v1/company-roles/{self.rep.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(CompanyRole.objects.filter(pk=self.rep.id).exists())

    def test_foreign_role_not_found(self):
        foreign = CompanyRole.objects.create(name='Foreign', company=TestDataFactory.create_company())
        response = self.client.get(f'/api/v1/company-roles/{foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class UserRoleAssignmentTests(TestCase):
    """Test assigning users to roles"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(is_company_admin=True)
        self.company = self.admin.company
        self.member = TestDataFactory.create_user(company=self.company)
        self.role = CompanyRole.objects.create(name='Sales', company=self.company)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_assign_and_filter(self):
        response = self.client.post(
            '/api/v1/user-role-assignments/', {'user': self.member.id, 'company_role': self.role.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['company_role_name'], 'Sales')
        response = self.client.get(f'/api/v1/user-role-assignments/?user={self.member.id}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get(f'/api/v1/user-role-assignments/?user={self.admin.id}')
        self.assertEqual(response.data, [])

    def test_filter_by_role(self):
        UserRoleAssignment.objects.create(user=self.member, company_role=self.role)
        response = self.client.get(f'/api/v1/user-role-assignments/?role={self.role.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_non_integer_filters_rejected(self):
        response = self.client.get('/api/v1/user-role-assignments/?role=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('role', response.data['errors'])
        response = self.client.get('/api/v1/user-role-assignments/?user=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('user', response.data['errors'])

    def test_duplicate_assignment(self):
        UserRoleAssignment.objects.create(user=self.member, company_role=self.role)
        response = self.client.post(
            '/api/v1/user-role-assignments/', {'user': self.member.id, 'company_role': self.role.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors']['user'], ['User is already assigned to this role'])

    def test_user_from_other_company(self):
        stranger = TestDataFactory.create_user()
        response = self.client.post(
            '/api/v1/user-role-assignments/', {'user': stranger.id, 'company_role': self.role.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors']['user'], ['User not found'])

    def test_remove_assignment(self):
        assignment = UserRoleAssignment.objects.create(user=self.member, company_role=self.role)
        response = self.client.delete(f'/api/v1/user-role-assignments/{assignment.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class ReleaseAndTranslationTests(TestCase):
    """Test releases and translations"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(is_company_admin=True)
        self.company = self.admin.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_release(self):
        response = self.client.post('/api/v1/releases/', {'release_name': 'Spring', 'order': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Planned')
        self.assertEqual(response.data['company'], self.company.id)

    def test_release_order_validation(self):
        response = self.client.post('/api/v1/releases/', {'release_name': 'Zero', 'order': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors']['order'], ['Order must be at least 1'])

    def test_releases_ordered_and_filtered(self):
        Release.objects.create(release_name='Second', order=2, status='Completed', company=self.company)
        Release.objects.create(release_name='First', order=1, company=self.company)
        Release.objects.create(release_name='Elsewhere', order=1, company=TestDataFactory.create_company())
        response = self.client.get('/api/v1/releases/')
        self.assertEqual([r['release_name'] for r in response.data], ['First', 'Second'])
        response = self.client.get('/api/v1/releases/?status=Completed')
        self.assertEqual([r['release_name'] for r in response.data], ['Second'])

    def test_translations_by_language(self):
        Translation.objects.create(label_code='save', label_content='Save', language_code='en')
        Translation.objects.create(label_code='save', label_content='Speichern', language_code='de')
        response = self.client.get('/api/v1/translations/?language=de')
        self.assertEqual([t['label_content'] for t in response.data], ['Speichern'])

    def test_translations_written_by_global_admin_only(self):
        payload = {'label_code': 'cancel', 'label_content': 'Cancel', 'language_code': 'en'}
        response = self.client.post('/api/v1/translations/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.authenticate_user(TestDataFactory.create_user(is_global_admin=True))
        response = self.client.post('/api/v1/translations/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)


class CompanySettingTests(TestCase):
    """Test setting masters, initialization and the setting change rules"""

    def setUp(self):
        domain = CompanySettingMasterDomain.objects.create(code='SALES', name='Sales')
        self.functionality = CompanySettingMasterFunctionality.objects.create(code='QUOTES', name='Quotes', domain=domain)
        self.quotes_enabled = CompanySettingsMaster.objects.create(
            functionality=self.functionality, setting_code='QUOTES_ENABLED', setting_name='Quotes enabled',
            setting_values='TRUE|FALSE', default_value='FALSE', setting_order_within_functionality=1,
        )
        self.pdf_enabled = CompanySettingsMaster.objects.create(
            functionality=self.functionality, setting_code='QUOTE_PDF', setting_name='Quote PDF',
            setting_values='TRUE|FALSE', default_value='FALSE', setting_order_within_functionality=2,
            cant_be_true_if_the_following_is_false='QUOTES_ENABLED',
        )
        self.locked = CompanySettingsMaster.objects.create(
            functionality=self.functionality, setting_code='MULTI_CURRENCY', setting_name='Multi currency',
            setting_values='TRUE|FALSE', default_value='FALSE', setting_order_within_functionality=3,
            setting_once_enabled_cannot_be_disabled=True,
        )
        # Settings are created with the user's company
        self.admin = TestDataFactory.create_user(is_company_admin=True)
        self.company = self.admin.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def setting(self, code):
        return CompanySetting.objects.get(company=self.company, setting_code=code)

    def test_master_denormalises_codes(self):
        self.assertEqual(self.quotes_enabled.setting_functional_domain_code, 'SALES')
        self.assertEqual(self.quotes_enabled.setting_functionality_name, 'Quotes')
        self.assertEqual(self.quotes_enabled.allowed_values, ['TRUE', 'FALSE'])

    def test_settings_created_with_company(self):
        self.assertEqual(CompanySetting.objects.filter(company=self.company).count(), 3)
        self.assertEqual(self.setting('QUOTES_ENABLED').setting_value, 'FALSE')
        self.assertEqual(initialize_company_settings(self.company), 0)

    def test_initialize_command(self):
        CompanySettingsMaster.objects.create(
            functionality=self.functionality, setting_code='NEW_ONE', setting_name='New',
            setting_values='A|B', default_value='A',
        )
        out = StringIO()
        call_command('initialize_company_settings', company=self.company.id, stdout=out)
        self.assertIn('Created 1 company settings.', out.getvalue())
        self.assertEqual(self.setting('NEW_ONE').setting_value, 'A')

    def test_initialize_command_unknown_company(self):
        with self.assertRaises(CommandError):
            call_command('initialize_company_settings', company=999999, stdout=StringIO())

    def test_domain_list(self):
        response = self.client.get('/api/v1/company-settings/SALES/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [s['setting_code'] for s in response.data], ['QUOTES_ENABLED', 'QUOTE_PDF', 'MULTI_CURRENCY']
        )
        self.assertEqual(response.data[0]['allowed_values'], ['TRUE', 'FALSE'])

    def test_member_cannot_read_settings(self):
        self.client.authenticate_user(TestDataFactory.create_user(company=self.company))
        response = self.client.get('/api/v1/company-settings/SALES/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_change_setting_audited(self):
        setting = self.setting('QUOTES_ENABLED')
        response = self.client.patch(
            f'/api/v1/company-settings/item/{setting.id}/', {'setting_value': 'TRUE'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['setting_value'], 'TRUE')
        log = AuditLog.objects.get(action='setting_change', object_id=str(setting.id))
        self.assertEqual(log.changes, {'setting_value': {'old': 'FALSE', 'new': 'TRUE'}})
        setting.refresh_from_db()
        self.assertEqual(setting.last_updated_by, self.admin)

    def test_value_must_be_allowed(self):
        setting = self.setting('QUOTES_ENABLED')
        response = self.client.patch(
            f'/api/v1/company-settings/item/{setting.id}/', {'setting_value': 'MAYBE'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Value must be one of: TRUE, FALSE')

    def test_prerequisite_must_be_true(self):
        setting = self.setting('QUOTE_PDF')
        url = f'/api/v1/company-settings/item/{setting.id}/'
        response = self.client.patch(url, {'setting_value': 'TRUE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot be TRUE while QUOTES_ENABLED is FALSE')

        prerequisite = self.setting('QUOTES_ENABLED')
        prerequisite.setting_value = 'TRUE'
        prerequisite.save()
        response = self.client.patch(url, {'setting_value': 'TRUE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_locked_once_enabled(self):
        setting = self.setting('MULTI_CURRENCY')
        url = f'/api/v1/company-settings/item/{setting.id}/'
        self.assertEqual(self.client.patch(url, {'setting_value': 'TRUE'}, format='json').status_code, 200)
        response = self.client.patch(url, {'setting_value': 'FALSE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'This setting cannot be disabled once enabled')

    def test_setting_value_required(self):
        setting = self.setting('QUOTES_ENABLED')
        response = self.client.patch(f'/api/v1/company-settings/item/{setting.id}/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_dependents(self):
        setting = self.setting('QUOTES_ENABLED')
        response = self.client.get(f'/api/v1/company-settings/item/{setting.id}/dependents/')
        self.assertEqual([s['setting_code'] for s in response.data], ['QUOTE_PDF'])

    def test_other_company_setting_not_found(self):
        stranger = TestDataFactory.create_user(is_company_admin=True)
        foreign = CompanySetting.objects.get(company=stranger.company, setting_code='QUOTES_ENABLED')
        response = self.client.get(f'/api/v1/company-settings/item/{foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_masters_global_admin_only(self):
        response = self.client.get('/api/v1/company-settings-masters/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.authenticate_user(TestDataFactory.create_user(is_global_admin=True))
        response = self.client.get('/api/v1/company-settings-masters/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 3)

    def test_master_default_must_be_allowed(self):
        self.client.authenticate_user(TestDataFactory.create_user(is_global_admin=True))
        response = self.client.post('/api/v1/company-settings-masters/', {
            'functionality': self.functionality.id, 'setting_code': 'BAD', 'setting_name': 'Bad',
            'setting_values': 'A|B', 'default_value': 'C',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('default_value', response.data['errors'])

    def test_master_in_use_cannot_be_deleted(self):
        self.client.authenticate_user(TestDataFactory.create_user(is_global_admin=True))
        response = self.client.delete(f'/api/v1/company-settings-masters/{self.quotes_enabled.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.delete(f'/api/v1/company-setting-master-domains/{self.functionality.domain_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
