# This file is part of snagnmrp
# Copyright (C) 2026 Bootlin
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License
# as published by the Free Software Foundation; either version 2
# of the License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.

import os.path
import logging
logger = logging.getLogger("snagnmrp")
import tftpy
# tftpy logs every retransmit at info level, keep it under our own logger
tftpy_logger = logging.getLogger("tftpy")
tftpy_logger.parent = logger

from snagnmrp.config import RecoveryConfig

TFTP_RETRIES = 3

def remote_filename(config: RecoveryConfig) -> str:
	if config.file_remote:
		return config.file_remote
	return os.path.basename(config.file_local)

def tftp_put(config: RecoveryConfig) -> int:
	filename = remote_filename(config)
	# rx_timeout is in milliseconds, sockets want seconds
	timeout = config.rx_timeout / 1000

	logger.info(f"Uploading {config.file_local} to {config.ipaddr}:{config.port} as {filename}...")
	client = tftpy.TftpClient(config.ipaddr, config.port)
	try:
		client.upload(filename, config.file_local, timeout=timeout, retries=TFTP_RETRIES)
	except tftpy.TftpException as e:
		logger.error(f"TFTP upload failed: {e}")
		return 1
	except OSError as e:
		logger.error(f"TFTP upload of {config.file_local} failed: {e}")
		return 1

	logger.info("TFTP upload done")
	return 0
