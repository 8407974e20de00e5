
"""A compact lookup for unicode character names

Maps character names to codepoints and back, so that a user can ask for RUPEE SIGN
instead of squinting at a chart to find U+20A8.

Names of CJK ideographs and hangul syllables are computed (see unirange). All others
are found by scanning a compressed table from the start (see nametable), which keeps
memory use to a few tens of kB at the cost of lookups taking time proportional
to the table size, around a few ms for characters high in the unicode range.
Tables are built with namebuild.

Example:
	>>> names = NameMap.from_dir('~/.local/share/uninames')
	>>> hex(names.code('RUPEE SIGN'))
	'0x20a8'
	>>> names.name(0xAC00)
	'HANGUL SYLLABLE GA'
"""

import functools
import logging
import sys

import argh

from nametable import (
	CHUNK_SIZE, CompressedTable, DatabaseCorrupt, DatabaseUnavailable, DirectoryProvider,
	NameMapError, TableScanner, load_info,
)
from pyconfig import CONF
from unirange import RangeRules

__REQUIRES__ = ['argh']

__all__ = [
	'NameMap', 'default_map', 'code', 'name',
	'NameMapError', 'NoSuchCharacter', 'InvalidCodepoint', 'DatabaseUnavailable', 'DatabaseCorrupt',
]

MAX_CODEPOINT = 0x10FFFF

logger = logging.getLogger('uninames')

CONF.register('conf_file', env_vars=['UNINAMES_CONF'])
CONF.register('data_dir', env_vars=['UNINAMES_DATA_DIR'], default='~/.local/share/uninames')
CONF.register('chunk_size', env_vars=['UNINAMES_CHUNK_SIZE'], default=CHUNK_SIZE, map_fn=int)


class NoSuchCharacter(NameMapError, KeyError):
	"""No character has the given name or codepoint"""


class InvalidCodepoint(NameMapError, ValueError):
	"""A codepoint outside of 0 to 0x10FFFF was given"""


class NameMap(object):
	"""Looks up unicode characters by name, and names by codepoint.
	Instances hold no per-lookup state, and may be shared between threads.
	"""

	def __init__(self, table, rules=None, chunk_size=CHUNK_SIZE):
		"""table is the CompressedTable to scan. rules is the RangeRules that the table
		was built with, by default those for unicode 3.0."""
		self.table = table
		self.rules = RangeRules() if rules is None else rules
		self.chunk_size = chunk_size

	@classmethod
	def from_dir(cls, path, chunk_size=CHUNK_SIZE):
		"""Open the table in the given directory, as written by namebuild.
		Raises DatabaseUnavailable if its manifest can't be read. The table itself
		is not read until it is needed."""
		provider = DirectoryProvider(path)
		info = load_info(provider)
		return cls(CompressedTable(provider, info), RangeRules.from_config(info.ideographs), chunk_size)

	def __repr__(self):
		return "<{} {!r}>".format(type(self).__name__, self.table)

	def _scanner(self):
		return TableScanner(self.table.open(self.chunk_size))

	def code(self, name):
		"""Look up name and return the associated codepoint as an integer.
		Both canonical names and aliases are accepted, case insensitively.
		Raises NoSuchCharacter if no character has that name."""
		# names are ascii, and str.upper() would map some non-ascii letters into ascii
		try:
			data = name.encode('ascii').upper()
		except UnicodeEncodeError:
			raise NoSuchCharacter(name)
		if not data:
			raise NoSuchCharacter(name)
		code = self.rules.code(data.decode('ascii'))
		if code is not None:
			return code
		code = self._scanner().lookup_code(data)
		if code is None:
			raise NoSuchCharacter(name)
		return code

	def name(self, code):
		"""Return the canonical name of the character with the given codepoint.
		Raises InvalidCodepoint if code is not a valid codepoint,
		or NoSuchCharacter if there is no character there."""
		if isinstance(code, bool) or not isinstance(code, int):
			raise InvalidCodepoint("Codepoint must be an integer, not {!r}".format(code))
		if not 0 <= code <= MAX_CODEPOINT:
			raise InvalidCodepoint("Codepoint {:#x} is outside 0 to {:#x}".format(code, MAX_CODEPOINT))
		name = self.rules.name(code)
		if name is not None:
			return name
		name = self._scanner().lookup_name(code)
		if name is None:
			raise NoSuchCharacter("U+{:04X}".format(code))
		return name

	def lookup(self, name):
		"""As code(), but returns the character itself"""
		return chr(self.code(name))


@functools.lru_cache(maxsize=None)
def default_map():
	"""The NameMap for the configured data dir (see pyconfig), created on first use."""
	CONF.load(env=True, user_config=True)
	return NameMap.from_dir(CONF.data_dir, CONF.chunk_size)


def code(name):
	"""code() on the default_map()"""
	return default_map().code(name)


def name(code):
	"""name() on the default_map()"""
	return default_map().name(code)


def _parse_codepoint(arg):
	if arg.upper().startswith('U+'):
		arg = arg[2:]
	return int(arg, 16)


def lookup(*items, data_dir=None):
	"""Print the name of each codepoint given, and the codepoint of each name given.
	Codepoints are in hex, optionally written as U+XXXX."""
	if not items:
		raise argh.CommandError("Nothing to look up")
	names = NameMap.from_dir(data_dir, CONF.chunk_size) if data_dir else default_map()
	failed = False
	for item in items:
		try:
			try:
				value = _parse_codepoint(item)
			except ValueError:
				print("{:04X}".format(names.code(item)))
			else:
				print(names.name(value))
		except NameMapError as e:
			logger.debug("Lookup of {!r} failed".format(item), exc_info=True)
			print("{}: {}".format(item, e), file=sys.stderr)
			failed = True
	if failed:
		sys.exit(1)


def main():
	logging.basicConfig(level='WARNING')
	from namebuild import build
	argh.dispatch_commands([lookup, build])


if __name__ == '__main__':
	main()
