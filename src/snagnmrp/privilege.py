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

import ctypes
import os
import platform
import logging
logger = logging.getLogger("snagnmrp")

from snagnmrp.utils import PrivilegeError

def is_windows() -> bool:
	return platform.system() == "Windows"

def is_admin() -> bool:
	if not is_windows():
		return os.geteuid() == 0

	try:
		# checks the process token for the builtin Administrators group
		return bool(ctypes.windll.shell32.IsUserAnAdmin())
	except (AttributeError, OSError):
		logger.warning("failed to check administrator privileges")
		return True

def require_admin() -> None:
	if is_admin():
		return

	account = "administrator" if is_windows() else "root"
	raise PrivilegeError(f"must be run as {account}")
