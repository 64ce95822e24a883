from db import models
from dbcase import ADMIN, ALICE, BOB, DatabaseTestCase
from services import identity
from utils.errors import ConflictError, ForbiddenError, UserNotFound, ValidationError


class IdentityTestCase(DatabaseTestCase):
    async def test_register_user(self):
        user = await identity.register_user(" carol@example.com ", "secret1")
        self.assertEqual((user.email, user.role), ("carol@example.com", models.Role.CUSTOMER))
        self.assertNotEqual(user.pwd, "secret1")
        with self.assertRaises(ConflictError):
            await identity.register_user("carol@example.com", "other12")
        with self.assertRaises(ValidationError):
            await identity.register_user("", "secret1")

    async def test_authenticate(self):
        self.assertEqual((await identity.authenticate(ALICE)).email, ALICE)
        with self.assertRaises(ForbiddenError) as ctx:
            await identity.authenticate(None)
        self.assertEqual(ctx.exception.message, "Access Denied. No credentials provided")
        with self.assertRaises(ForbiddenError):
            await identity.authenticate("ghost@example.com")

    async def test_require_role(self):
        self.assertEqual((await identity.require_role(ADMIN, models.Role.ADMIN)).uid, 1)
        with self.assertRaises(ForbiddenError):
            await identity.require_role(ALICE, models.Role.ADMIN)

    async def test_list_users(self):
        users = await identity.list_users()
        self.assertEqual([u.email for u in users], [ADMIN, ALICE, BOB])

    async def test_get_user_scoped_to_caller(self):
        admin = await identity.authenticate(ADMIN)
        alice = await identity.authenticate(ALICE)
        bob = await identity.authenticate(BOB)

        self.assertEqual(await identity.get_user(alice.uid, alice), alice)
        self.assertEqual(await identity.get_user(bob.uid, admin), bob)
        with self.assertRaises(ForbiddenError):
            await identity.get_user(bob.uid, alice)
        with self.assertRaises(UserNotFound):
            await identity.get_user(424242, admin)
