import unittest

from fakes import FakeProvider

from core.errors import AuthenticationError, SessionError
from core.models import SessionState
from core.session import SessionGate
from docstore.models import Identity


class SessionGateTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.ready = []
        self.failures = []
        self.gate = SessionGate(self.ready.append, self.failures.append)

    def test_initial_fetch_fires_once_for_repeated_identities(self):
        identity = Identity(uid="u1")
        self.gate.handle_identity(identity)
        self.gate.handle_identity(identity)
        self.assertEqual(self.ready, [identity])
        self.assertIs(self.gate.state, SessionState.ESTABLISHED)

    def test_no_identity_keeps_gate_pending(self):
        self.gate.handle_identity(None)
        self.assertIs(self.gate.state, SessionState.PENDING)
        self.assertEqual(self.ready, [])

    async def test_start_signs_in_and_latches(self):
        provider = FakeProvider(repeat=3)
        await self.gate.start(provider)

        self.assertEqual(provider.sign_in_calls, 1)
        self.assertEqual(len(self.ready), 1)
        self.assertTrue(self.gate.established)
        self.assertEqual(self.gate.identity.uid, "user-1")

    async def test_existing_user_skips_sign_in(self):
        provider = FakeProvider(current_user=Identity(uid="known"))
        await self.gate.start(provider)

        self.assertEqual(provider.sign_in_calls, 0)
        self.assertEqual([i.uid for i in self.ready], ["known"])

    async def test_failed_sign_in_is_fatal(self):
        provider = FakeProvider(error=AuthenticationError("The custom token is invalid."))
        await self.gate.start(provider)

        self.assertIs(self.gate.state, SessionState.FAILED)
        self.assertEqual(self.ready, [])
        self.assertEqual(len(self.failures), 1)
        self.assertEqual(self.failures[0].message, "The custom token is invalid.")

        # a late identity does not revive the session
        self.gate.handle_identity(Identity(uid="late"))
        self.assertIs(self.gate.state, SessionState.FAILED)
        self.assertEqual(self.ready, [])

    async def test_unexpected_provider_error_becomes_session_error(self):
        provider = FakeProvider(error=ConnectionError("network down"))
        await self.gate.start(provider)

        self.assertIsInstance(self.failures[0], SessionError)
        self.assertEqual(str(self.failures[0]), "network down")


if __name__ == "__main__":
    unittest.main()
