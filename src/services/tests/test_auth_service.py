"""Unit tests for auth_service (signup, signin, refresh, social signin)."""

import unittest
from datetime import timedelta
from unittest.mock import patch

from services import auth_service, credential_service
from services.token_service import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenService
from adapter.fake.identity_provider import FakeIdentityProvider
from adapter.memory.user_repository import InMemoryUserRepository
from domain.model.errors import (
    AuthenticationError,
    DuplicateError,
    ExternalAuthError,
    FeatureNotImplementedError,
    InvalidCredentialError,
    NotFoundError,
    PermissionDeniedError,
)

PASSWORD = 'Abcd1234'


class AuthServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = InMemoryUserRepository()
        self.tokens = TokenService('test-secret')
        rounds = patch.object(credential_service, 'BCRYPT_ROUNDS', 4)
        rounds.start()
        self.addCleanup(rounds.stop)


class TestSignupSignin(AuthServiceTestCase):

    def test_signup_returns_user_and_both_tokens(self):
        result = auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD)

        self.assertEqual(result.user.email, 'ann@x.com')
        self.assertEqual(self.tokens.verify(result.access_token, ACCESS_TOKEN_TYPE), result.user.id)
        self.assertEqual(self.tokens.verify(result.refresh_token, REFRESH_TOKEN_TYPE), result.user.id)

    def test_signup_twice_with_same_email_conflicts(self):
        auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD)
        with self.assertRaises(DuplicateError):
            auth_service.signup(self.repo, self.tokens, 'Ann 2', 'ann@x.com', 'Other5678')
        self.assertEqual(len(self.repo.store), 1)

    def test_signin_success_stamps_last_login(self):
        signed_up = auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD)
        self.assertIsNone(signed_up.user.last_login)

        result = auth_service.signin(self.repo, self.tokens, 'ann@x.com', PASSWORD)

        self.assertEqual(result.user.id, signed_up.user.id)
        self.assertIsNotNone(result.user.last_login)
        self.assertEqual(self.tokens.verify(result.access_token), signed_up.user.id)
        self.assertIsNotNone(result.refresh_token)

    def test_signin_unknown_email(self):
        with self.assertRaises(AuthenticationError):
            auth_service.signin(self.repo, self.tokens, 'nobody@x.com', PASSWORD)

    def test_signin_wrong_password(self):
        auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD)
        with self.assertRaises(AuthenticationError):
            auth_service.signin(self.repo, self.tokens, 'ann@x.com', 'wrong')

    def test_signin_deactivated_account_never_succeeds(self):
        user = auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD).user
        credential_service.set_active(self.repo, user.id, False)

        with self.assertRaises(PermissionDeniedError):
            auth_service.signin(self.repo, self.tokens, 'ann@x.com', PASSWORD)
        self.assertIsNone(self.repo.get_by_id(user.id).last_login)

    def test_signin_social_only_account_with_password_fails(self):
        self.repo.create(email='g@x.com', name='G', external_ids={'google': 'g-1'})
        with self.assertRaises(AuthenticationError):
            auth_service.signin(self.repo, self.tokens, 'g@x.com', PASSWORD)

    def test_scenario_ann(self):
        result = auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD)
        self.assertEqual(result.user.email, 'ann@x.com')

        with self.assertRaises(DuplicateError):
            auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD)
        with self.assertRaises(AuthenticationError):
            auth_service.signin(self.repo, self.tokens, 'ann@x.com', 'wrong')

        signed_in = auth_service.signin(self.repo, self.tokens, 'ann@x.com', PASSWORD)
        self.assertIsNotNone(signed_in.user.last_login)


class TestRefresh(AuthServiceTestCase):

    def test_refresh_issues_new_access_token_only(self):
        signed_up = auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD)

        result = auth_service.refresh(self.tokens, signed_up.refresh_token)

        self.assertIsNone(result.refresh_token)
        self.assertIsNone(result.user)
        self.assertEqual(self.tokens.verify(result.access_token, ACCESS_TOKEN_TYPE), signed_up.user.id)

    def test_refresh_rejects_access_token(self):
        signed_up = auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD)
        with self.assertRaises(PermissionDeniedError):
            auth_service.refresh(self.tokens, signed_up.access_token)

    def test_refresh_rejects_garbage(self):
        with self.assertRaises(PermissionDeniedError):
            auth_service.refresh(self.tokens, 'garbage')

    def test_refresh_rejects_expired_token(self):
        expired_issuer = TokenService('test-secret', refresh_token_expires=timedelta(seconds=-1))
        token = expired_issuer.issue_refresh_token('user-1')
        with self.assertRaises(PermissionDeniedError):
            auth_service.refresh(self.tokens, token)


class TestPlaceholders(unittest.TestCase):

    def test_signout_is_a_no_op(self):
        self.assertIsNone(auth_service.signout())

    def test_password_reset_flows_are_not_implemented(self):
        with self.assertRaises(FeatureNotImplementedError):
            auth_service.forgot_password()
        with self.assertRaises(FeatureNotImplementedError):
            auth_service.reset_password()


class TestAccountOperations(AuthServiceTestCase):

    def setUp(self):
        super().setUp()
        self.user = auth_service.signup(self.repo, self.tokens, 'Ann', 'ann@x.com', PASSWORD).user

    def test_get_and_update_profile(self):
        updated = auth_service.update_profile(self.repo, self.user.id, email='annie@x.com')
        self.assertEqual(updated.email, 'annie@x.com')
        self.assertEqual(auth_service.get_profile(self.repo, self.user.id).email, 'annie@x.com')

    def test_change_password_then_signin_with_new_one(self):
        auth_service.change_password(self.repo, self.user.id, PASSWORD, 'NewPass99')

        with self.assertRaises(AuthenticationError):
            auth_service.signin(self.repo, self.tokens, 'ann@x.com', PASSWORD)
        auth_service.signin(self.repo, self.tokens, 'ann@x.com', 'NewPass99')

    def test_change_password_wrong_current(self):
        with self.assertRaises(InvalidCredentialError):
            auth_service.change_password(self.repo, self.user.id, 'Wrong1234', 'NewPass99')

    def test_delete_account(self):
        auth_service.delete_account(self.repo, self.user.id)
        with self.assertRaises(NotFoundError):
            auth_service.get_profile(self.repo, self.user.id)
        with self.assertRaises(AuthenticationError):
            auth_service.signin(self.repo, self.tokens, 'ann@x.com', PASSWORD)


class TestSocialSignin(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.repo = InMemoryUserRepository()
        self.tokens = TokenService('test-secret')
        self.provider = FakeIdentityProvider('google')
        self.provider.add('good-token', subject_id='g-1', email='ann@x.com', name='Ann')

    async def test_first_login_creates_user_and_issues_tokens(self):
        result = await auth_service.social_signin(self.repo, self.tokens, self.provider, 'good-token')

        self.assertEqual(result.user.external_ids, {'google': 'g-1'})
        self.assertIsNotNone(result.user.last_login)
        self.assertEqual(self.tokens.verify(result.access_token), result.user.id)
        self.assertIsNotNone(result.refresh_token)

    async def test_second_login_resolves_to_same_user(self):
        first = await auth_service.social_signin(self.repo, self.tokens, self.provider, 'good-token')
        second = await auth_service.social_signin(self.repo, self.tokens, self.provider, 'good-token')

        self.assertEqual(first.user.id, second.user.id)
        self.assertEqual(len(self.repo.store), 1)

    async def test_links_existing_password_account(self):
        existing = self.repo.create(email='ann@x.com', name='Ann', password_hash='hash-1')

        result = await auth_service.social_signin(self.repo, self.tokens, self.provider, 'good-token')

        self.assertEqual(result.user.id, existing.id)
        self.assertEqual(result.user.external_ids, {'google': 'g-1'})
        self.assertEqual(len(self.repo.store), 1)

    async def test_rejected_assertion(self):
        with self.assertRaises(ExternalAuthError):
            await auth_service.social_signin(self.repo, self.tokens, self.provider, 'bad-token')
        self.assertEqual(self.repo.store, {})

    async def test_deactivated_password_account_is_refused_without_linking(self):
        existing = self.repo.create(email='ann@x.com', name='Ann', password_hash='hash-1')
        self.repo.set_active(existing.id, False)

        with self.assertRaises(PermissionDeniedError):
            await auth_service.social_signin(self.repo, self.tokens, self.provider, 'good-token')

        stored = self.repo.get_by_id(existing.id)
        self.assertEqual(stored.external_ids, {})
        self.assertIsNone(stored.last_login)

    async def test_deactivated_account(self):
        first = await auth_service.social_signin(self.repo, self.tokens, self.provider, 'good-token')
        self.repo.set_active(first.user.id, False)

        with self.assertRaises(PermissionDeniedError):
            await auth_service.social_signin(self.repo, self.tokens, self.provider, 'good-token')


if __name__ == '__main__':
    unittest.main()
