from django.test import TestCase

from myapp.exceptions import AuthorizationError
from myapp.testing import claims_for, make_user
from users.models import User
from users.permissions import policy


class OwnershipPolicyTest(TestCase):
    def setUp(self):
        self.owner = make_user(username="owner")
        self.other = make_user(username="other")
        self.admin = make_user(username="boss", role=User.ADMIN)

    def test_owner_may_mutate(self):
        self.assertTrue(policy.can_mutate(self.owner.id, User.USER, self.owner.id))

    def test_admin_role_does_not_grant_ownership(self):
        self.assertFalse(policy.can_mutate(self.admin.id, User.ADMIN, self.owner.id))
        with self.assertRaises(AuthorizationError):
            policy.ensure_can_mutate(claims_for(self.admin), self.owner.id, "Not yours")

    def test_ensure_can_mutate_message(self):
        with self.assertRaises(AuthorizationError) as context:
            policy.ensure_can_mutate(claims_for(self.other), self.owner.id, "Not yours")
        self.assertEqual(context.exception.message, "Not yours")
        self.assertEqual(context.exception.status_code, 403)


class AdminSelfProtectionTest(TestCase):
    def setUp(self):
        self.admin = make_user(username="boss", role=User.ADMIN)
        self.second_admin = make_user(username="deputy", role=User.ADMIN)

    def test_self_demotion_rejected(self):
        with self.assertRaises(AuthorizationError):
            policy.ensure_can_change_role(self.admin.id, self.admin, User.USER)

    def test_demoting_another_admin_allowed(self):
        policy.ensure_can_change_role(self.admin.id, self.second_admin, User.USER)

    def test_self_role_noop_allowed(self):
        policy.ensure_can_change_role(self.admin.id, self.admin, User.ADMIN)

    def test_self_delete_rejected(self):
        with self.assertRaises(AuthorizationError) as context:
            policy.ensure_can_delete_user(self.admin.id, self.admin.id)
        self.assertEqual(context.exception.error, "Invalid operation")

    def test_deleting_another_admin_allowed(self):
        policy.ensure_can_delete_user(self.admin.id, self.second_admin.id)
