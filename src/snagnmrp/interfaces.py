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
import socket
import logging
logger = logging.getLogger("snagnmrp")

SYSFS_NET = "/sys/class/net"

def get_hwaddr(name: str) -> str:
	# only Linux exposes this without raw socket access
	path = os.path.join(SYSFS_NET, name, "address")
	try:
		with open(path, "r") as file:
			return file.read().strip()
	except OSError:
		return ""

def list_network_interfaces() -> int:
	try:
		interfaces = socket.if_nameindex()
	except OSError as e:
		logger.error(f"failed to list network interfaces: {e}")
		return 1

	if interfaces == []:
		logger.warning("No network interfaces found")
		return 0

	for index, name in sorted(interfaces):
		hwaddr = get_hwaddr(name)
		print(f"{name:<16} {index:>4}  {hwaddr}".rstrip())

	return 0
