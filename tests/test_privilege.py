import unittest
from unittest.mock import MagicMock, patch

from snagnmrp.privilege import is_admin, require_admin
from snagnmrp.utils import PrivilegeError


class TestPosixPrivilege(unittest.TestCase):
	def setUp(self) -> None:
		patcher = patch("snagnmrp.privilege.platform.system", return_value="Linux")
		patcher.start()
		self.addCleanup(patcher.stop)

	def test_root(self):
		with patch("snagnmrp.privilege.os.geteuid", return_value=0, create=True):
			self.assertTrue(is_admin())
			require_admin()

	def test_regular_user(self):
		with patch("snagnmrp.privilege.os.geteuid", return_value=1000, create=True):
			self.assertFalse(is_admin())
			with self.assertRaisesRegex(PrivilegeError, "must be run as root"):
				require_admin()


class TestWindowsPrivilege(unittest.TestCase):
	def setUp(self) -> None:
		patcher = patch("snagnmrp.privilege.platform.system", return_value="Windows")
		patcher.start()
		self.addCleanup(patcher.stop)

	def test_administrator(self):
		ctypes = MagicMock()
		ctypes.windll.shell32.IsUserAnAdmin.return_value = 1
		with patch("snagnmrp.privilege.ctypes", ctypes):
			self.assertTrue(is_admin())
			require_admin()

	def test_regular_user(self):
		ctypes = MagicMock()
		ctypes.windll.shell32.IsUserAnAdmin.return_value = 0
		with patch("snagnmrp.privilege.ctypes", ctypes):
			self.assertFalse(is_admin())
			with self.assertRaisesRegex(PrivilegeError, "must be run as administrator"):
				require_admin()

	def test_check_unavailable(self):
		# no windll attribute at all
		with patch("snagnmrp.privilege.ctypes", MagicMock(spec=[])):
			with self.assertLogs("snagnmrp", level="WARNING") as logs:
				self.assertTrue(is_admin())

		self.assertIn("failed to check administrator privileges", logs.output[0])


if __name__ == "__main__":
	unittest.main()
