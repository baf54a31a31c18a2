import os
import tempfile
import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from svalutation import manage
from svalutation.core.auth import verify_password
from svalutation.models import Credential, SchoolClass


class TestManage(unittest.TestCase):
    def setUp(self):
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.path = os.path.join(tmpdir.name, "manage.db")
        self.url = f"sqlite:///{self.path}"

    def run_command(self, *argv):
        with self.assertRaises(SystemExit) as cm:
            manage.main(["--database-url", self.url, *argv])
        return cm.exception.code

    def test_commands(self):
        self.assertEqual(self.run_command("create-tables"), 0)
        self.assertEqual(self.run_command("add-class", "4D"), 0)
        self.assertEqual(self.run_command("add-credential", "alice", "--password", "first"), 0)
        self.assertEqual(self.run_command("add-credential", "alice", "--password", "second"), 0)

        engine = create_engine(self.url)
        self.addCleanup(engine.dispose)
        with Session(engine) as session:
            classes = session.query(SchoolClass).all()
            self.assertEqual([c.name for c in classes], ["4D"])

            credential = session.get(Credential, "alice")
            self.assertNotEqual(credential.password, "second")
            self.assertTrue(verify_password("second", credential.password))
            self.assertFalse(verify_password("first", credential.password))

    def test_unknown_command(self):
        with self.assertRaises(SystemExit) as cm:
            manage.main(["--database-url", self.url, "drop-everything"])
        self.assertNotEqual(cm.exception.code, 0)
