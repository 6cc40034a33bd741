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

import sys
import argparse
import enum
import logging
import platform
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from snagnmrp import __version__
from snagnmrp.config import RecoveryConfig, init_config
from snagnmrp.dispatch import Operations, dispatch
from snagnmrp.features import Features
from snagnmrp.privilege import require_admin
from snagnmrp.utils import UsageError, InvalidNumericValue, PrivilegeError

PROG = "snagnmrp"

INT_MAX = 0x7fffffff
PORT_MAX = 0xffff

# plain ASCII decimal, as atoi() reads it
NUMERIC = re.compile(r"[+-]?[0-9]+")
# namespace attribute holding the first InvalidNumericValue
INVALID_VALUE = "invalid_value"

VALUE_OPTIONS = "acfFimMtTp"
FLAG_OPTIONS = "vVLh"

class ParseState(enum.Enum):
	EARLY_EXIT = enum.auto()
	TRANSFER_TEST = enum.auto()
	VALIDATION_FAILURE = enum.auto()
	VALIDATED = enum.auto()

@dataclass
class ParseResult:
	state: ParseState
	config: Optional[RecoveryConfig] = None
	list_mode: bool = False
	verbosity: int = 0
	# stdout text for early exits, stderr text for failures
	output: str = ""

class EarlyExit(Exception):
	def __init__(self, output: str):
		self.output = output
		super().__init__(output)

class TransferTestRequested(Exception):
	def __init__(self, namespace: argparse.Namespace):
		self.namespace = namespace
		super().__init__("transfer test requested")

class NmrpArgumentParser(argparse.ArgumentParser):
	"""
	Raises instead of printing and exiting, so that parse_cli() stays the
	only place where parse outcomes are decided.
	"""

	def error(self, message: str):
		raise UsageError(message)

class NumericAction(argparse.Action):
	"""
	The first invalid value is only recorded, so that a later -V or -h
	still wins. parse_cli() reports it once all tokens are consumed.
	"""

	def __init__(self, option_strings, dest, maximum=INT_MAX, scale=1, **kwargs):
		self.maximum = maximum
		self.scale = scale
		super().__init__(option_strings, dest, **kwargs)

	def __call__(self, parser, namespace, values, option_string=None):
		if NUMERIC.fullmatch(values) is None:
			record_invalid_value(namespace, option_string)
			return

		value = int(values)
		if value <= 0 or value > self.maximum:
			record_invalid_value(namespace, option_string)
			return

		setattr(namespace, self.dest, value * self.scale)

def record_invalid_value(namespace: argparse.Namespace, option_string: str) -> None:
	if getattr(namespace, INVALID_VALUE, None) is None:
		setattr(namespace, INVALID_VALUE, InvalidNumericValue(option_string))

class FlagAction(argparse.Action):
	def __init__(self, option_strings, dest, help=None):
		super().__init__(option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, nargs=0, help=help)

class VersionAction(FlagAction):
	def __call__(self, parser, namespace, values, option_string=None):
		raise EarlyExit(f"{PROG} v{__version__}\n")

class HelpAction(FlagAction):
	def __call__(self, parser, namespace, values, option_string=None):
		raise EarlyExit(parser.format_help())

class TransferTestAction(FlagAction):
	def __call__(self, parser, namespace, values, option_string=None):
		# only valid once -a and -f have been seen
		if namespace.ipaddr is None or namespace.file_local is None:
			parser.error(f"unrecognized arguments: {option_string}")

		raise TransferTestRequested(namespace)

def get_epilog() -> str:
	if platform.system() == "Windows":
		account = "administrator"
		example = f"C:\\> {PROG}.exe -i net0 -a 192.168.1.254 -f firmware.bin"
	else:
		account = "root"
		example = f"# {PROG} -i eth0 -a 192.168.1.254 -f firmware.bin"

	return f"""Example: (run as {account})

	{example}

{PROG} v{__version__}, licensed under the GNU GPLv2 or later.
"""

def get_parser(features: Features) -> NmrpArgumentParser:
	parser = NmrpArgumentParser(
		prog=PROG,
		description="Unbrick network devices through their NMRP recovery mode",
		epilog=get_epilog(),
		formatter_class=argparse.RawDescriptionHelpFormatter,
		add_help=False,
	)
	mandatory = parser.add_argument_group("Mandatory", "-a, -i and -f and/or -c are mandatory")
	mandatory.add_argument("-a", dest="ipaddr", help="IP address to assign to target device", metavar="<ipaddr>")
	mandatory.add_argument("-c", dest="tftpcmd", help="Command to run before (or instead of) TFTP upload", metavar="<command>")
	mandatory.add_argument("-f", dest="file_local", help="Firmware file", metavar="<firmware>")
	mandatory.add_argument("-i", dest="intf", help="Network interface directly connected to device", metavar="<interface>")

	optional = parser.add_argument_group("Optional")
	optional.add_argument("-F", dest="file_remote", help="Remote filename to use during TFTP upload", metavar="<filename>")
	optional.add_argument("-m", dest="mac", help="MAC address of target device (xx:xx:xx:xx:xx:xx)", metavar="<mac>")
	optional.add_argument("-M", dest="ipmask", help="Subnet mask to assign to target device", metavar="<netmask>")
	optional.add_argument("-t", dest="rx_timeout", action=NumericAction,
			help="Timeout (in milliseconds) for regular messages", metavar="<timeout>")
	optional.add_argument("-T", dest="ul_timeout", action=NumericAction, scale=1000,
			help="Time (seconds) to wait after successful TFTP upload", metavar="<timeout>")
	optional.add_argument("-p", dest="port", action=NumericAction, maximum=PORT_MAX,
			help="Port to use for TFTP upload", metavar="<port>")
	if features.set_region:
		optional.add_argument("-R", dest="region",
				help="Set device region (NA, WW, GR, PR, RU, BZ, IN, KO, JP)", metavar="<region>")
	optional.add_argument("-v", dest="verbosity", action="count", default=0, help="Be verbose")

	utilargs = parser.add_argument_group("Utilities")
	if features.tftp_test:
		utilargs.add_argument("-U", action=TransferTestAction, help="Test TFTP upload")
	utilargs.add_argument("-V", action=VersionAction, help="Print version and exit")
	utilargs.add_argument("-L", dest="list_mode", action="store_true", help="List network interfaces")
	utilargs.add_argument("-h", action=HelpAction, help="Show this screen")

	return parser

def usage_error(parser: argparse.ArgumentParser, message: str) -> str:
	return parser.format_help() + f"{PROG}: error: {message}\n"

def get_option_letters(features: Features) -> Tuple[str, str]:
	value_options = VALUE_OPTIONS + ("R" if features.set_region else "")
	flag_options = FLAG_OPTIONS + ("U" if features.tftp_test else "")
	return value_options, flag_options

def is_option_cluster(arg: str) -> bool:
	return len(arg) > 1 and arg.startswith("-") and not arg.startswith("--")

def scan_cluster(arg: str, value_options: str, flag_options: str) -> Tuple[str, bool]:
	"""
	Walks a short option cluster such as -vvf<file> the way getopt does.
	Returns the letters read, stopping after the first value-taking or
	unknown one, and whether that option takes the next token as value.
	"""
	letters = ""
	for index, letter in enumerate(arg[1:], start=1):
		letters += letter
		if letter in value_options:
			return letters, index == len(arg) - 1
		if letter not in flag_options:
			break

	return letters, False

def attach_option_values(argv: List[str], features: Features) -> List[str]:
	"""
	argparse refuses option values starting with '-', getopt takes the next
	token whatever it is. Such values are glued to their option:
	["-c", "-reboot"] becomes ["-c-reboot"], which argparse reads as the
	value of -c.
	"""
	value_options, flag_options = get_option_letters(features)
	tokens = []
	args = iter(argv)

	for arg in args:
		if arg == "--":
			tokens.append(arg)
			tokens.extend(args)
			break

		tokens.append(arg)
		if not is_option_cluster(arg):
			continue

		_, needs_value = scan_cluster(arg, value_options, flag_options)
		value = next(args, None) if needs_value else None
		if value is None:
			continue

		if value.startswith("-"):
			tokens[-1] = arg + value
		else:
			tokens.append(value)

	return tokens

def unknown_before_transfer_test(tokens: List[str], features: Features) -> Optional[str]:
	# first token that argparse leaves unrecognized ahead of -U
	value_options, flag_options = get_option_letters(features)
	args = iter(tokens)

	for arg in args:
		if not is_option_cluster(arg):
			return arg

		letters, needs_value = scan_cluster(arg, value_options, flag_options)
		if "U" in letters:
			return None

		if needs_value:
			next(args, None)
		elif letters[-1] not in value_options + flag_options:
			return arg

	return None

def numeric_error(error: InvalidNumericValue) -> ParseResult:
	return ParseResult(ParseState.VALIDATION_FAILURE, output=f"{error}\n")

def parse_cli(argv: Optional[List[str]] = None, features: Optional[Features] = None) -> ParseResult:
	if features is None:
		features = Features()
	if argv is None:
		argv = sys.argv[1:]

	parser = get_parser(features)
	tokens = attach_option_values(argv, features)

	try:
		args, extras = parser.parse_known_args(tokens)
	except EarlyExit as e:
		return ParseResult(ParseState.EARLY_EXIT, output=e.output)
	except TransferTestRequested as e:
		invalid = getattr(e.namespace, INVALID_VALUE, None)
		if invalid is not None:
			return numeric_error(invalid)

		unknown = unknown_before_transfer_test(tokens, features)
		if unknown is not None:
			return ParseResult(
				ParseState.VALIDATION_FAILURE,
				output=usage_error(parser, f"unrecognized arguments: {unknown}"),
			)

		return ParseResult(
			ParseState.TRANSFER_TEST,
			config=init_config(e.namespace),
			verbosity=e.namespace.verbosity,
		)
	except UsageError as e:
		return ParseResult(ParseState.VALIDATION_FAILURE, output=usage_error(parser, str(e)))

	invalid = getattr(args, INVALID_VALUE, None)
	if invalid is not None:
		return numeric_error(invalid)

	if extras:
		return ParseResult(
			ParseState.VALIDATION_FAILURE,
			output=usage_error(parser, "unrecognized arguments: " + " ".join(extras)),
		)

	config = init_config(args)

	if not args.list_mode and not config.is_complete():
		return ParseResult(
			ParseState.VALIDATION_FAILURE,
			config=config,
			verbosity=args.verbosity,
			output=usage_error(parser, "missing mandatory arguments"),
		)

	return ParseResult(
		ParseState.VALIDATED,
		config=config,
		list_mode=args.list_mode,
		verbosity=args.verbosity,
	)

def setup_logging(verbosity: int) -> logging.Logger:
	logger = logging.getLogger("snagnmrp")
	logger.setLevel(logging.DEBUG if verbosity > 0 else logging.INFO)
	log_formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

	for handler in list(logger.handlers):
		logger.removeHandler(handler)

	stdout_handler = logging.StreamHandler(sys.stdout)
	stdout_handler.setFormatter(log_formatter)
	logger.addHandler(stdout_handler)

	return logger

def run_validated(result: ParseResult, operations: Operations) -> int:
	try:
		require_admin()
	except PrivilegeError as e:
		print(f"Error: {e}", file=sys.stderr)
		return 1

	return dispatch(result.config, result.list_mode, operations)

def main(argv: Optional[List[str]] = None, features: Optional[Features] = None,
		operations: Optional[Operations] = None) -> int:
	if operations is None:
		operations = Operations()

	result = parse_cli(argv, features)

	if result.state is ParseState.EARLY_EXIT:
		print(result.output, end="")
		status = 0
	elif result.state is ParseState.VALIDATION_FAILURE:
		print(result.output, end="", file=sys.stderr)
		status = 1
	else:
		logger = setup_logging(result.verbosity)
		logger.debug(f"verbosity level {result.verbosity}")
		logger.debug(f"recovery config: {result.config}")

		if result.state is ParseState.TRANSFER_TEST:
			# test builds only, no privileges needed
			status = operations.transfer_test(result.config)
		else:
			status = run_validated(result, operations)

	return status

def cli():
	sys.exit(main())

if __name__ == "__main__":
	cli()
