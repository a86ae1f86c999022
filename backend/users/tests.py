import re
from datetime import timedelta
from io import StringIO
from urllib.parse import parse_qs, urlparse

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from django.core import mail
from django.contrib.auth.tokens import default_token_generator
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode
from rest_framework.test import APIClient
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from businesses.models import Business
from canvases.models import BusinessModelCanvas
from users.models import User, Profile, AdminInvite
from users.navigation import build_navigation, resolve_route
from users.services import delete_user_cascade
from users.tasks import send_password_reset_email


def make_user(email, role="student", full_name="Test User", password="testpassword123"):
    user = User.objects.create_user(email=email, password=password)
    Profile.objects.create(user=user, role=role, full_name=full_name)
    return user


def make_business(owner, name="Campus Coffee", industry="Food & Beverage", **extra):
    return Business.objects.create(
        owner=owner,
        name=name,
        description=extra.pop("description", "Fresh coffee on campus"),
        industry=industry,
        **extra
    )


@override_settings(SITE_ORIGIN='https://showcase.example.edu')
class PasswordResetTests(TestCase):
    def setUp(self):
        self.user = make_user('taylor@example.com')
        self.client = APIClient()
        self.forgot_url = reverse('forgot-password')
        self.reset_url = reverse('reset-password')

    def emailed_link(self):
        match = re.search(r'https://\S+', mail.outbox[-1].body)
        return urlparse(match.group(0))

    def reset(self, uid, token, new_password='fresh-pass-42'):
        return self.client.post(self.reset_url, {'uid': uid, 'token': token, 'new_password': new_password}, format='json')

    def test_reset_link_points_at_site_origin(self):
        response = self.client.post(self.forgot_url, {'email': 'Taylor@Example.com '}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Password reset email sent')
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, 'Reset your Business Showcase password')
        self.assertEqual(mail.outbox[0].to, ['taylor@example.com'])

        link = self.emailed_link()
        self.assertEqual(f'{link.scheme}://{link.netloc}', 'https://showcase.example.edu')
        self.assertEqual(link.path, '/reset-password')
        self.assertEqual(set(parse_qs(link.query)), {'uid', 'token'})

    def test_emailed_link_resets_password_once(self):
        self.client.post(self.forgot_url, {'email': 'taylor@example.com'}, format='json')
        query = parse_qs(self.emailed_link().query)
        uid, token = query['uid'][0], query['token'][0]

        response = self.reset(uid, token)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Password has been reset')
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('fresh-pass-42'))

        # The token is bound to the old password hash
        response = self.reset(uid, token, new_password='another-pass-7')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid or expired reset link.')

    def test_unknown_or_inactive_account_gets_no_email(self):
        User.objects.filter(pk=self.user.pk).update(is_active=False)

        for email in ('taylor@example.com', 'nobody@example.com'):
            response = self.client.post(self.forgot_url, {'email': email}, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data['error'], 'No account found with this email address.')

        self.assertEqual(mail.outbox, [])

    def test_task_skips_deactivated_user(self):
        User.objects.filter(pk=self.user.pk).update(is_active=False)

        self.assertFalse(send_password_reset_email(self.user.pk))
        self.assertEqual(mail.outbox, [])

    def test_rejected_reset_requests_keep_old_password(self):
        uid = urlsafe_base64_encode(force_bytes(self.user.pk))
        token = default_token_generator.make_token(self.user)
        cases = [
            (uid, 'not-a-token', 'fresh-pass-42'),
            ('bm90LWEtdWlk', token, 'fresh-pass-42'),
            (uid, token, '12345'),
        ]

        for case_uid, case_token, new_password in cases:
            response = self.reset(case_uid, case_token, new_password)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('testpassword123'))


class RegistrationTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse('register')

    def test_register_student(self):
        """A student registration creates the account and its profile"""
        response = self.client.post(self.url, {
            'full_name': 'Jane Doe',
            'email': 'Jane@Example.com',
            'password': 'secure123',
            'role': 'student',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['redirect'], '/login')

        user = User.objects.get(email='jane@example.com')
        self.assertEqual(user.profile.role, 'student')
        self.assertEqual(user.profile.full_name, 'Jane Doe')
        self.assertEqual(user.profile.pk, user.pk)

    def test_register_duplicate_email(self):
        make_user('jane@example.com')
        response = self.client.post(self.url, {
            'full_name': 'Jane Again',
            'email': 'jane@example.com',
            'password': 'secure123',
            'role': 'student',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['errors'])

    def test_register_admin_without_code_is_rejected(self):
        """Admin role needs a server-issued invite code"""
        response = self.client.post(self.url, {
            'full_name': 'Mallory',
            'email': 'mallory@example.com',
            'password': 'secure123',
            'role': 'admin',
            'admin_code': 'admincode',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid admin code')
        self.assertFalse(User.objects.filter(email='mallory@example.com').exists())

    def test_register_admin_consumes_invite(self):
        invite = AdminInvite.issue()
        payload = {
            'full_name': 'Ada Admin',
            'email': 'ada@example.com',
            'password': 'secure123',
            'role': 'admin',
            'admin_code': invite.code,
        }

        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        user = User.objects.get(email='ada@example.com')
        self.assertTrue(user.is_admin())
        invite.refresh_from_db()
        self.assertTrue(invite.is_used)
        self.assertEqual(invite.used_by, user)

        # The same code cannot be used twice
        payload['email'] = 'eve@example.com'
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.filter(email='eve@example.com').exists())


class LoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse('login')
        self.student = make_user('student@example.com', role='student', password='secure123')

    def _session(self):
        return self.client.get(reverse('session'))

    def test_login_success_sets_cookie(self):
        response = self.client.post(self.url, {
            'email': 'student@example.com',
            'password': 'secure123',
            'role': 'student',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['redirect'], '/dashboard')
        self.assertTrue(response.cookies['access_token'].value)

        # The cookie alone is enough to be signed in
        session = self._session()
        self.assertTrue(session.data['authenticated'])
        self.assertEqual(session.data['user']['email'], 'student@example.com')

    def test_login_invalid_credentials(self):
        response = self.client.post(self.url, {
            'email': 'student@example.com',
            'password': 'wrong-password',
            'role': 'student',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid email or password. Please try again.')
        self.assertNotIn('refresh', response.data)

    def test_login_role_mismatch_terminates_session(self):
        """Valid credentials with the wrong role never yield a session"""
        # Start from a signed-in state to prove it gets cleared
        self.client.post(self.url, {
            'email': 'student@example.com',
            'password': 'secure123',
            'role': 'student',
        }, format='json')
        self.assertTrue(self._session().data['authenticated'])

        response = self.client.post(self.url, {
            'email': 'student@example.com',
            'password': 'secure123',
            'role': 'admin',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid credentials for admin login')
        self.assertNotIn('refresh', response.data)
        self.assertEqual(response.cookies['access_token'].value, '')

        self.assertFalse(self._session().data['authenticated'])

    def test_login_role_mismatch_revokes_earlier_refresh_token(self):
        first = self.client.post(self.url, {
            'email': 'student@example.com',
            'password': 'secure123',
            'role': 'student',
        }, format='json')
        refresh = RefreshToken(first.data['refresh'])

        response = self.client.post(self.url, {
            'email': 'student@example.com',
            'password': 'secure123',
            'role': 'admin',
            'refresh': first.data['refresh'],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(BlacklistedToken.objects.filter(token__jti=refresh['jti']).exists())

    def test_login_rejection_ignores_unusable_refresh_token(self):
        response = self.client.post(self.url, {
            'email': 'student@example.com',
            'password': 'wrong-password',
            'role': 'student',
            'refresh': 'garbage',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid email or password. Please try again.')
        self.assertFalse(BlacklistedToken.objects.exists())

    def test_login_without_profile_is_rejected(self):
        User.objects.create_user(email='orphan@example.com', password='secure123')
        response = self.client.post(self.url, {
            'email': 'orphan@example.com',
            'password': 'secure123',
            'role': 'student',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid credentials for student login')


class SessionAndGuardTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user('student@example.com')

    def test_protected_endpoint_redirects_anonymous(self):
        """No session: 401 pointing at sign-in, with none of the protected payload"""
        response = self.client.get(reverse('dashboard'))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {"error": "Authentication required.", "redirect": "/login"})

    def test_invalid_token_is_treated_as_no_session(self):
        self.client.cookies['access_token'] = 'not-a-real-token'

        self.assertFalse(self.client.get(reverse('session')).data['authenticated'])
        self.assertEqual(self.client.get(reverse('business-manage')).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_malformed_bearer_header_is_treated_as_no_session(self):
        for header in ('Bearer', 'Bearer a b'):
            self.client.credentials(HTTP_AUTHORIZATION=header)

            self.assertEqual(self.client.get(reverse('business-list')).status_code, status.HTTP_200_OK)
            response = self.client.get(reverse('session'))
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertFalse(response.data['authenticated'])
            self.assertEqual(self.client.get(reverse('dashboard')).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_bearer_header_is_accepted(self):
        access = RefreshToken.for_user(self.user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')

        response = self.client.get(reverse('user-profile'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['profile']['role'], 'student')

    def test_session_reports_redirect_for_protected_route(self):
        response = self.client.get(reverse('session'), {'path': '/dashboard'})
        self.assertEqual(response.data['redirect'], '/login')
        self.assertIsNone(response.data['user'])

        response = self.client.get(reverse('session'), {'path': '/businesses/4'})
        self.assertIsNone(response.data['redirect'])

        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse('session'), {'path': '/business/manage'})
        self.assertIsNone(response.data['redirect'])
        self.assertTrue(response.data['authenticated'])

    def test_navigation_follows_session_state(self):
        anonymous_keys = [link['key'] for link in build_navigation(None)]
        self.assertIn('login', anonymous_keys)
        self.assertNotIn('logout', anonymous_keys)
        self.assertNotIn('dashboard', anonymous_keys)

        signed_in_keys = [link['key'] for link in build_navigation(self.user)]
        self.assertIn('logout', signed_in_keys)
        self.assertIn('profile', signed_in_keys)
        self.assertNotIn('login', signed_in_keys)

    def test_resolve_route(self):
        self.assertEqual(resolve_route('/business/manage/', None), '/login')
        self.assertIsNone(resolve_route('/', None))
        self.assertIsNone(resolve_route('/dashboard', self.user))

    def test_logout_always_succeeds(self):
        """Sign-out answers 200 even when the refresh token is unusable"""
        response = self.client.post(reverse('logout'), {'refresh': 'garbage'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['redirect'], '/')
        self.assertEqual(response.cookies['access_token'].value, '')

    def test_logout_blacklists_refresh_token(self):
        refresh = RefreshToken.for_user(self.user)
        response = self.client.post(reverse('logout'), {'refresh': str(refresh)}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(BlacklistedToken.objects.filter(token__jti=refresh['jti']).exists())


class UserManagementTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user('admin@example.com', role='admin', full_name='Ada Admin')
        self.student = make_user('student@example.com', role='student', full_name='Sam Student')
        # Make the admin the older profile so ordering is deterministic
        Profile.objects.filter(pk=self.admin.pk).update(created_at=timezone.now() - timedelta(days=1))

    def test_student_cannot_list_users(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get(reverse('user-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_student_cannot_delete_users(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.delete(reverse('user-delete', args=[self.admin.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_admin_lists_users_newest_first(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('user-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [self.student.pk, self.admin.pk])
        rows = {row['id']: row for row in response.data}
        self.assertFalse(rows[self.admin.pk]['can_delete'])
        self.assertTrue(rows[self.student.pk]['can_delete'])

    def test_admin_deletes_user_with_business(self):
        business = make_business(self.student)
        BusinessModelCanvas.objects.create(business=business, key_partners=['University'])

        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(reverse('user-delete', args=[self.student.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted'], {'businesses': 1, 'profile': 1, 'account': 1})
        self.assertFalse(Business.objects.filter(pk=business.pk).exists())
        self.assertFalse(BusinessModelCanvas.objects.exists())
        self.assertFalse(Profile.objects.filter(pk=self.student.pk).exists())
        self.assertFalse(User.objects.filter(pk=self.student.pk).exists())

    def test_admin_cannot_delete_self(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(reverse('user-delete', args=[self.admin.pk]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_unknown_user(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(reverse('user-delete', args=[999999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'User not found')

    def test_admin_issues_invite(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('admin-invite'))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        invite = AdminInvite.objects.get(code=response.data['code'])
        self.assertEqual(invite.created_by, self.admin)
        self.assertFalse(invite.is_used)


class CreateAdminInviteCommandTests(TestCase):
    def test_command_prints_usable_codes(self):
        out = StringIO()
        call_command('create_admin_invite', '--count', '2', stdout=out)

        codes = out.getvalue().split()
        self.assertEqual(len(codes), 2)
        self.assertEqual(AdminInvite.objects.filter(code__in=codes, used_at__isnull=True).count(), 2)


class DeleteUserCascadeTests(TestCase):
    def test_cascade_without_businesses(self):
        """The business step is a no-op, profile and account still go"""
        user = make_user('nobiz@example.com')

        deleted = delete_user_cascade(user.pk)

        self.assertEqual(deleted, {'businesses': 0, 'profile': 1, 'account': 1})
        self.assertFalse(Profile.objects.filter(pk=user.pk).exists())
        self.assertFalse(User.objects.filter(pk=user.pk).exists())

    def test_cascade_leaves_other_users_alone(self):
        doomed = make_user('doomed@example.com')
        keeper = make_user('keeper@example.com')
        make_business(doomed, name='Doomed Donuts')
        kept = make_business(keeper, name='Kept Kiosk')

        delete_user_cascade(doomed.pk)

        self.assertEqual(list(Business.objects.all()), [kept])
        self.assertTrue(Profile.objects.filter(pk=keeper.pk).exists())

    def test_cascade_unknown_user(self):
        with self.assertRaises(User.DoesNotExist):
            delete_user_cascade(424242)
