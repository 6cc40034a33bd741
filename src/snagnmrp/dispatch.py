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

from dataclasses import dataclass
from typing import Callable
import logging
logger = logging.getLogger("snagnmrp")

from snagnmrp.config import RecoveryConfig
from snagnmrp.interfaces import list_network_interfaces
from snagnmrp.tftp import tftp_put
from snagnmrp.utils import get_recovery, RecoveryUnavailable

def run_recovery(config: RecoveryConfig) -> int:
	recovery = get_recovery()

	logger.info(f"Starting recovery of device at {config.ipaddr} on {config.intf}")
	status = recovery(config)
	if status == 0:
		logger.info("Done recovering device")
	else:
		logger.debug(f"recovery backend returned {status}")

	return status

@dataclass
class Operations:
	"""
	The three operations the CLI can end up in. Each one returns the
	process exit status.
	"""
	recover: Callable[[RecoveryConfig], int] = run_recovery
	list_interfaces: Callable[[], int] = list_network_interfaces
	transfer_test: Callable[[RecoveryConfig], int] = tftp_put

def dispatch(config: RecoveryConfig, list_mode: bool, operations: Operations) -> int:
	if list_mode:
		return operations.list_interfaces()

	try:
		return operations.recover(config)
	except RecoveryUnavailable as e:
		logger.error(f"Recovery error: {e}")
		return 1
