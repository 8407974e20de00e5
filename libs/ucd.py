
"""Routines for reading character names from a copy of the Unicode Character Database in xml form"""

import logging

from bs4 import BeautifulSoup, SoupStrainer

__REQUIRES__ = ['bs4', 'lxml']


class UCD(object):
	"""Represents the named characters of a UCD database and provides methods for lookup."""

	def __init__(self, path):
		"""path should be the path to ucd.all.flat.xml (or ucd.nounihan.flat.xml)"""
		logger = logging.getLogger('uninames').getChild('ucd')

		logger.info("Parsing {}".format(path))
		with open(path, 'rb') as f:
			xml = BeautifulSoup(f, 'lxml-xml', parse_only=SoupStrainer('char'))

		self.code_points = {}

		for char in xml.find_all('char'):
			attrs = dict(char.attrs)

			if 'cp' in attrs:
				cp_range = [int(attrs['cp'], 16)]
			else:
				start = int(attrs['first-cp'], 16)
				end = int(attrs['last-cp'], 16)
				cp_range = range(start, end + 1)

			aliases = [(alias["alias"], alias.get("type")) for alias in char.find_all("name-alias", recursive=False)]

			for cp in cp_range:
				self.code_points[cp] = CodePoint(self, cp, attrs, aliases)

		logger.info("Read {} characters".format(len(self.code_points)))

	def all_chars(self):
		"""Returns a list of all code points, in order"""
		return [self.code_points[cp] for cp in sorted(self.code_points)]

	def __repr__(self):
		return '<{}, {} code points>'.format(type(self).__name__, len(self.code_points))
	__str__ = __repr__


class CodePoint(object):
	"""Contains the names of a single code point."""

	def __init__(self, db, value, attrs, aliases):
		self._db = db
		self.value = value
		self.attrs = attrs
		self._aliases = aliases

	def __repr__(self):
		return '<{} {} {!r}>'.format(type(self).__name__, self.value, self.name)
	__str__ = __repr__

	def _expand_name(self, name):
		# names of ranges like CJK ideographs are given as a pattern, eg. "CJK UNIFIED IDEOGRAPH-#"
		return name.replace('#', '{:04X}'.format(self.value))

	@property
	def name(self):
		"""The canonical name of the code point, or '' for characters (like controls) without one"""
		return self._expand_name(self.attrs.get('na', ''))

	@property
	def original_name(self):
		"""The name of the character as it was in Unicode 1.0, or None"""
		na1 = self.attrs.get('na1')
		return self._expand_name(na1) if na1 else None

	@property
	def aliases(self):
		"""A list of (alias, type) for the formal aliases of this character, in order.
		The type indicates if it is eg. an abbreviation, a correction, etc."""
		return self._aliases

	@property
	def names(self):
		"""All names of this character, most preferred first, with no repeats.
		Where there is no canonical name, the Unicode 1.0 name and then any
		control alias stand in for it."""
		names = []
		controls = [alias for alias, kind in self.aliases if kind == 'control']
		others = [alias for alias, kind in self.aliases if kind != 'control']
		for name in [self.name, self.original_name] + controls + others:
			if name and name not in names:
				names.append(name)
		return names
