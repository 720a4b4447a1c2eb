"""
Test suite for the core module
Tests: registration, login, company context, users, companies, audit logs and global search
"""
from unittest import mock

from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.test import TestCase, RequestFactory
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken
from backend.core.models import AuditLog, Company, User
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import get_company_context, create_audit_log


class RegistrationTests(TestCase):
    """Test self-service sign-up"""

    def setUp(self):
        self.client = APIClient()
        self.payload = {
            'first_name': 'Ada',
            'last_name': 'Lovelace',
            'email': 'ada@example.com',
            'password': 'Engines-of-1843',
            'company_official_name': 'Analytical Ltd',
            'company_registration_id': 'REG-001',
        }

    def test_register_creates_company_and_admin(self):
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        user = User.objects.get(username='ada@example.com')
        self.assertTrue(user.is_company_admin)
        self.assertEqual(user.company.company_official_name, 'Analytical Ltd')
        self.assertEqual(user.company_context_id, user.company_id)

    def test_duplicate_registration_id(self):
        TestDataFactory.create_company(company_registration_id='REG-001')
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('company_registration_id', response.data['errors'])

    def test_duplicate_email(self):
        TestDataFactory.create_user(username='someone', email='ADA@example.com')
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['errors'])

    def test_failed_user_save_leaves_no_company(self):
        with mock.patch.object(User, 'save', side_effect=IntegrityError('duplicate username')):
            response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Company.objects.filter(company_registration_id='REG-001').exists())
        response = self.client.post('/api/v1/auth/register/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_missing_fields(self):
        response = self.client.post('/api/v1/auth/register/', {'email': 'x@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid data')


class AuthenticationTests(TestCase):
    """Test login, token claims and the current user endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='alice', password='testpass123', is_company_admin=True)
        self.client = APIClient()

    def test_login_returns_tokens_with_claims(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'alice', 'password': 'testpass123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = AccessToken(response.data['access'])
        self.assertEqual(token['username'], 'alice')
        self.assertEqual(token['company_id'], self.user.company_id)
        self.assertEqual(token['company_context'], self.user.company_id)
        self.assertTrue(token['is_company_admin'])
        self.assertEqual(response.data['user']['username'], 'alice')

    def test_login_sets_context_and_audits(self):
        self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 'testpass123'}, format='json')
        self.user.refresh_from_db()
        self.assertEqual(self.user.company_context_id, self.user.company_id)
        self.assertTrue(AuditLog.objects.filter(action='login', user=self.user).exists())

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_inactive_user(self):
        self.user.is_active = False
        self.user.save()
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'alice', 'password': 'testpass123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'alice', 'password': 'testpass123'}, format='json'
        )
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': response.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_invalid_token(self):
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': 'garbage'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company_context'], self.user.company_id)
        self.assertEqual(response.data['company_context_name'], str(self.user.company))
        self.assertTrue(response.data['is_admin'])
        self.assertFalse(response.data['is_global_admin'])

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CompanyContextTests(TestCase):
    """Test switching the company context"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.other = TestDataFactory.create_company()
        self.client = AuthenticatedAPIClient()

    def test_member_cannot_switch_to_other_company(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/v1/auth/company-context/', {'company_id': self.other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_company(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/v1/auth/company-context/', {'company_id': 999999}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_company_id_required(self):
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/v1/auth/company-context/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_global_admin_switch_scopes_records(self):
        admin = TestDataFactory.create_user(is_global_admin=True)
        owner = TestDataFactory.create_user(company=self.other)
        TestDataFactory.create_account(self.other, owner, name='Other Co Account')
        self.client.authenticate_user(admin)

        response = self.client.post('/api/v1/auth/company-context/', {'company_id': self.other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company_context'], self.other.id)
        self.assertTrue(AuditLog.objects.filter(action='context_switch', company=self.other).exists())

        response = self.client.get('/api/v1/accounts/')
        self.assertEqual([a['name'] for a in response.data], ['Other Co Account'])

    def test_context_falls_back_to_own_company(self):
        request = RequestFactory().get('/api/v1/accounts/')
        request.user = self.user
        self.assertIsNone(self.user.company_context_id)
        self.assertEqual(get_company_context(request), self.user.company_id)


class UserAPITests(TestCase):
    """Test user management endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(is_company_admin=True)
        self.company = self.admin.company
        self.member = TestDataFactory.create_user(company=self.company)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_list_users_of_company(self):
        TestDataFactory.create_user()
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({u['id'] for u in response.data}, {self.admin.id, self.member.id})

    def test_member_cannot_manage_users(self):
        self.client.authenticate_user(self.member)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_user_in_company(self):
        response = self.client.post('/api/v1/users/', {
            'username': 'newbie', 'email': 'newbie@example.com',
            'password': 'Quiet-River-42', 'password_confirm': 'Quiet-River-42',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(username='newbie')
        self.assertEqual(user.company_id, self.company.id)
        self.assertTrue(user.check_password('Quiet-River-42'))

    def test_create_user_password_mismatch(self):
        response = self.client.post('/api/v1/users/', {
            'username': 'newbie', 'email': 'newbie@example.com',
            'password': 'Quiet-River-42', 'password_confirm': 'Loud-River-42',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_user_of_other_company_not_found(self):
        stranger = TestDataFactory.create_user()
        response = self.client.get(f'/api/v1/users/{stranger.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_user(self):
        response = self.client.patch(f'/api/v1/users/{self.member.id}/', {'first_name': 'Bob'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['first_name'], 'Bob')

    def test_cannot_delete_self(self):
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_delete_account_owner(self):
        TestDataFactory.create_account(self.company, self.member)
        response = self.client.delete(f'/api/v1/users/{self.member.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete user who owns accounts')

    def test_delete_user(self):
        response = self.client.delete(f'/api/v1/users/{self.member.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.member.id).exists())


class CompanyAPITests(TestCase):
    """Test company endpoints"""

    def setUp(self):
        self.global_admin = TestDataFactory.create_user(is_global_admin=True)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.global_admin)

    def test_company_admin_cannot_list_companies(self):
        self.client.authenticate_user(TestDataFactory.create_user(is_company_admin=True))
        response = self.client.get('/api/v1/companies/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_company(self):
        response = self.client.post('/api/v1/companies/', {'company_official_name': '  Fresh Co  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['company_official_name'], 'Fresh Co')

    def test_blank_company_name(self):
        response = self.client.post('/api/v1/companies/', {'company_official_name': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_company_with_users_refused(self):
        response = self.client.delete(f'/api/v1/companies/{self.global_admin.company_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_empty_company(self):
        company = TestDataFactory.create_company()
        response = self.client.delete(f'/api/v1/companies/{company.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Company.objects.filter(pk=company.id).exists())

    def test_current_company_name(self):
        company = TestDataFactory.create_company(name='Official Name', company_alias='Alias')
        user = TestDataFactory.create_user(company=company)
        self.client.authenticate_user(user)
        response = self.client.get('/api/v1/companies/current/name/')
        self.assertEqual(response.data, {'company_name': 'Alias'})


class AuditLogAPITests(TestCase):
    """Test audit log listing, filtering and access"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(is_company_admin=True)
        self.company = self.admin.company
        self.member = TestDataFactory.create_user(company=self.company)
        create_audit_log(action='create', model_name='accounts', object_id=1, user=self.admin, company_id=self.company.id)
        create_audit_log(action='update', model_name='quotes', object_id=2, user=self.member, company_id=self.company.id)
        stranger = TestDataFactory.create_user()
        self.foreign_log = create_audit_log(
            action='create', model_name='accounts', object_id=3, user=stranger, company_id=stranger.company_id
        )
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_admin_sees_company_logs(self):
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_member_sees_own_logs(self):
        self.client.authenticate_user(self.member)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual([log['model_name'] for log in response.data], ['quotes'])

    def test_filters(self):
        response = self.client.get('/api/v1/audit-logs/?action=update')
        self.assertEqual([log['object_id'] for log in response.data], ['2'])
        response = self.client.get('/api/v1/audit-logs/?model=accounts')
        self.assertEqual([log['object_id'] for log in response.data], ['1'])
        today = timezone.now().date().isoformat()
        response = self.client.get(f'/api/v1/audit-logs/?date_from={today}&date_to={today}')
        self.assertEqual(len(response.data), 2)

    def test_invalid_date_filter(self):
        response = self.client.get('/api/v1/audit-logs/?date_from=yesterday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_foreign_log_forbidden(self):
        response = self.client.get(f'/api/v1/audit-logs/{self.foreign_log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_failed_write_keeps_surrounding_transaction(self):
        def failing_create(**kwargs):
            with transaction.mark_for_rollback_on_error():
                raise IntegrityError('audit insert failed')

        with transaction.atomic():
            company = TestDataFactory.create_company()
            with mock.patch.object(AuditLog.objects, 'create', side_effect=failing_create):
                log = create_audit_log(
                    action='create', model_name='companies', object_id=company.id, user=self.admin,
                    company_id=company.id,
                )
            self.assertIsNone(log)
        self.assertTrue(Company.objects.filter(pk=company.id).exists())

    def test_incomplete_log_skipped(self):
        self.assertIsNone(create_audit_log(action='create', model_name='accounts'))


class GlobalSearchTests(TestCase):
    """Test search across all registered objects"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_search_groups_results_by_object(self):
        customer = TestDataFactory.create_account(self.company, self.user, name='Zephyr Industries')
        TestDataFactory.create_quote(self.company, name='Zephyr rollout', customer=customer)
        TestDataFactory.create_account(self.company, self.user, name='Other')
        response = self.client.get('/api/v1/search/?q=zephyr')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(set(response.data), {'accounts', 'assets', 'products', 'quotes'})
        self.assertEqual([a['name'] for a in response.data['accounts']], ['Zephyr Industries'])
        self.assertEqual([q['name'] for q in response.data['quotes']], ['Zephyr rollout'])
        self.assertEqual(response.data['assets'], [])

    def test_empty_query(self):
        TestDataFactory.create_account(self.company, self.user)
        response = self.client.get('/api/v1/search/')
        self.assertTrue(all(results == [] for results in response.data.values()))

    def test_search_is_company_scoped(self):
        stranger = TestDataFactory.create_user()
        TestDataFactory.create_account(stranger.company, stranger, name='Zephyr Elsewhere')
        response = self.client.get('/api/v1/search/?q=zephyr')
        self.assertEqual(response.data['accounts'], [])
