import io
import os
import contextlib
import tempfile
import unittest
from unittest.mock import patch

from snagnmrp.interfaces import get_hwaddr, list_network_interfaces


class TestInterfaces(unittest.TestCase):
	def test_list(self):
		stdout = io.StringIO()
		with patch("snagnmrp.interfaces.socket.if_nameindex", return_value=[(2, "eth0"), (1, "lo")]), \
				patch("snagnmrp.interfaces.get_hwaddr", side_effect=["00:00:00:00:00:00", "aa:bb:cc:dd:ee:ff"]), \
				contextlib.redirect_stdout(stdout):
			self.assertEqual(list_network_interfaces(), 0)

		lines = stdout.getvalue().splitlines()
		self.assertEqual(len(lines), 2)
		self.assertTrue(lines[0].startswith("lo"))
		self.assertTrue(lines[1].startswith("eth0"))
		self.assertTrue(lines[1].endswith("aa:bb:cc:dd:ee:ff"))

	def test_enumeration_error(self):
		with patch("snagnmrp.interfaces.socket.if_nameindex", side_effect=OSError("not supported")):
			with self.assertLogs("snagnmrp", level="ERROR"):
				self.assertEqual(list_network_interfaces(), 1)

	def test_hwaddr(self):
		with tempfile.TemporaryDirectory() as sysfs:
			os.mkdir(os.path.join(sysfs, "eth0"))
			with open(os.path.join(sysfs, "eth0", "address"), "w") as file:
				file.write("aa:bb:cc:dd:ee:ff\n")

			with patch("snagnmrp.interfaces.SYSFS_NET", sysfs):
				self.assertEqual(get_hwaddr("eth0"), "aa:bb:cc:dd:ee:ff")
				self.assertEqual(get_hwaddr("eth1"), "")


if __name__ == "__main__":
	unittest.main()
