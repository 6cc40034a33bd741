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

import importlib.metadata
import logging
logger = logging.getLogger("snagnmrp")

RECOVERY_ENTRY_POINTS = "snagnmrp.recoveries"
RECOVERY_NAME = "nmrp"

class SnagnmrpError(Exception):
	pass

class CliError(SnagnmrpError):
	pass

class UsageError(CliError):
	pass

class InvalidNumericValue(CliError):
	def __init__(self, option: str):
		self.option = option
		super().__init__(f"Invalid numeric value for {option}.")

class PrivilegeError(SnagnmrpError):
	pass

class RecoveryUnavailable(SnagnmrpError):
	pass

def get_recovery(name: str = RECOVERY_NAME):
	"""
	Recovery backends register a callable taking a RecoveryConfig and
	returning an exit status, under the snagnmrp.recoveries entry point
	group.
	"""
	for entry_point in importlib.metadata.entry_points(group=RECOVERY_ENTRY_POINTS):
		if entry_point.name == name:
			logger.debug(f"Loading recovery backend {entry_point.value}")
			return entry_point.load()

	raise RecoveryUnavailable(f"no '{name}' recovery backend is installed")
