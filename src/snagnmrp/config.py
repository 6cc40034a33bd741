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

import argparse
import dataclasses
import enum
from dataclasses import dataclass
from typing import Optional

class Operation(enum.Enum):
	UPLOAD_FW = enum.auto()

DEFAULT_IPMASK = "255.255.255.0"
DEFAULT_MAC = "ff:ff:ff:ff:ff:ff"
DEFAULT_PORT = 69
# milliseconds
DEFAULT_RX_TIMEOUT = 200
DEFAULT_UL_TIMEOUT = 120000

@dataclass(frozen=True)
class RecoveryConfig:
	ipaddr: Optional[str] = None
	ipmask: str = DEFAULT_IPMASK
	intf: Optional[str] = None
	mac: str = DEFAULT_MAC
	file_local: Optional[str] = None
	file_remote: Optional[str] = None
	tftpcmd: Optional[str] = None
	region: Optional[str] = None
	rx_timeout: int = DEFAULT_RX_TIMEOUT
	ul_timeout: int = DEFAULT_UL_TIMEOUT
	port: int = DEFAULT_PORT
	op: Operation = Operation.UPLOAD_FW

	def is_complete(self) -> bool:
		has_payload = self.file_local is not None or self.tftpcmd is not None
		return has_payload and self.intf is not None and self.ipaddr is not None

def init_config(args: argparse.Namespace) -> RecoveryConfig:
	# options that were never given keep the record's defaults
	fields = {}
	for field in dataclasses.fields(RecoveryConfig):
		value = getattr(args, field.name, None)
		if value is not None:
			fields[field.name] = value

	return RecoveryConfig(**fields)
