import unittest
from unittest.mock import patch

import tftpy

from snagnmrp.config import RecoveryConfig
from snagnmrp.tftp import tftp_put, remote_filename, TFTP_RETRIES

CONFIG = RecoveryConfig(ipaddr="192.168.1.254", file_local="/tmp/images/firmware.bin")


class TestTftpPut(unittest.TestCase):
	def setUp(self) -> None:
		patcher = patch("snagnmrp.tftp.tftpy.TftpClient")
		self.client_class = patcher.start()
		self.client = self.client_class.return_value
		self.addCleanup(patcher.stop)

	def test_remote_filename(self):
		self.assertEqual(remote_filename(CONFIG), "firmware.bin")
		config = RecoveryConfig(ipaddr="192.168.1.254", file_local="firmware.bin", file_remote="remote.img")
		self.assertEqual(remote_filename(config), "remote.img")

	def test_upload(self):
		self.assertEqual(tftp_put(CONFIG), 0)
		self.client_class.assert_called_once_with("192.168.1.254", 69)
		self.client.upload.assert_called_once_with(
			"firmware.bin", "/tmp/images/firmware.bin", timeout=0.2, retries=TFTP_RETRIES
		)

	def test_upload_port(self):
		config = RecoveryConfig(ipaddr="10.0.0.1", file_local="fw.bin", port=6969, rx_timeout=1500)
		tftp_put(config)
		self.client_class.assert_called_once_with("10.0.0.1", 6969)
		self.assertEqual(self.client.upload.call_args.kwargs["timeout"], 1.5)

	def test_tftp_error(self):
		self.client.upload.side_effect = tftpy.TftpException("timed out")
		with self.assertLogs("snagnmrp", level="ERROR"):
			self.assertEqual(tftp_put(CONFIG), 1)

	def test_missing_file(self):
		self.client.upload.side_effect = FileNotFoundError("firmware.bin")
		with self.assertLogs("snagnmrp", level="ERROR"):
			self.assertEqual(tftp_put(CONFIG), 1)


if __name__ == "__main__":
	unittest.main()
