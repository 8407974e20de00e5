
"""Builds the compressed name tables read by nametable

Names can come from the UCD xml files (see ucd), which include Unicode 1.0 names and
formal aliases, or from the running interpreter's unicodedata module, which only knows
canonical names.

Ideograph ranges whose names are just a prefix and their own code are found in the
source, recorded in the table's manifest and left out of the table, as are the hangul
syllables. Everything else is encoded as records (see nametable) and compressed.
"""

import errno
import io
import json
import logging
import os
import tempfile
import unicodedata
import zipfile
import zlib

import requests

from nametable import ALIAS, INFO_RESOURCE, NAME_MAX, SKIP_LIMIT, SKIP_MIN, TableInfo
from ucd import UCD
from unirange import RangeRules

__REQUIRES__ = ['requests', 'ucd']


IDEOGRAPH_PREFIXES = [
	'CJK UNIFIED IDEOGRAPH-',
	'CJK COMPATIBILITY IDEOGRAPH-',
	'TANGUT IDEOGRAPH-',
	'KHITAN SMALL SCRIPT CHARACTER-',
	'NUSHU CHARACTER-',
]

UCD_URL = 'https://www.unicode.org/Public/{version}/ucdxml/ucd.{flavour}.flat.zip'
UCD_LATEST_URL = 'https://www.unicode.org/Public/UCD/latest/ucdxml/ucd.{flavour}.flat.zip'

MAX_CODEPOINT = 0x10FFFF

logger = logging.getLogger('uninames').getChild('build')


def write_atomic(path, data):
	"""Replace the contents of path with data (bytes), so readers see either the old
	contents or all of the new ones. The data is first written to a hidden file in
	the same directory (and so, in most cases, on the same filesystem)."""
	dirname, name = os.path.split(os.path.realpath(os.path.abspath(path)))
	fd, tmppath = tempfile.mkstemp(prefix='.{}.'.format(name), suffix='.tmp', dir=dirname)
	try:
		with os.fdopen(fd, 'wb') as f:
			f.write(data)
		os.chmod(tmppath, 0o644) # mkstemp creates files readable only by us
		os.replace(tmppath, os.path.join(dirname, name))
	except BaseException:
		try:
			os.remove(tmppath)
		except OSError as e:
			if e.errno != errno.ENOENT:
				raise
		raise


def encode_name(name):
	"""Returns the name record for name, as bytes"""
	try:
		data = name.encode('ascii')
	except UnicodeEncodeError:
		raise ValueError("Name is not ascii: {!r}".format(name))
	if len(data) > NAME_MAX:
		raise ValueError("Name is longer than {} characters: {!r}".format(NAME_MAX, name))
	return bytes([len(data)]) + data


def encode_skip(gap):
	"""Returns skip records (as bytes) advancing the codepoint by gap"""
	out = bytearray()
	while gap > 0:
		step = min(gap, SKIP_LIMIT)
		out += bytes([SKIP_MIN + step // 256, step % 256])
		gap -= step
	return bytes(out)


def encode_records(entries):
	"""Takes an iterable of (codepoint, names) in strictly ascending codepoint order,
	where names is a non-empty list with the canonical name first.
	Returns the uncompressed record stream as bytes."""
	out = bytearray()
	cursor = 0
	for code, names in entries:
		if code < cursor:
			raise ValueError("Codepoints must be strictly ascending: got {:#x} after {:#x}".format(code, cursor - 1))
		if not names:
			raise ValueError("No names given for codepoint {:#x}".format(code))
		out += encode_skip(code - cursor)
		for i, name in enumerate(names):
			if i:
				out.append(ALIAS)
			out += encode_name(name)
		cursor = code + 1
	return bytes(out)


def compress(records):
	"""Raw deflate, with no header or trailer"""
	compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
	return compressor.compress(records) + compressor.flush()


def unicodedata_entries():
	"""Yields (codepoint, [name]) for every character the interpreter's unicodedata names"""
	for code in range(MAX_CODEPOINT + 1):
		name = unicodedata.name(chr(code), None)
		if name:
			yield code, [name]


def ucd_entries(path):
	"""Yields (codepoint, names) for every named character in a UCD flat xml file"""
	for char in UCD(path).all_chars():
		names = [name.upper() for name in char.names]
		if names:
			yield char.value, names


def detect_ideographs(entries, prefixes=IDEOGRAPH_PREFIXES):
	"""Finds the runs of consecutive codepoints named by a prefix and their own hex code,
	and nothing else. Returns them as [[prefix, [[first, last], ...]], ...], in the form
	RangeRules.from_config() takes."""
	runs = {prefix: [] for prefix in prefixes}
	for code, names in entries:
		if len(names) != 1:
			continue
		for prefix in prefixes:
			if names[0] == "{}{:X}".format(prefix, code):
				ranges = runs[prefix]
				if ranges and ranges[-1][1] == code - 1:
					ranges[-1][1] = code
				else:
					ranges.append([code, code])
				break
	return [[prefix, runs[prefix]] for prefix in prefixes if runs[prefix]]


def build_table(entries, output_dir, version=None, prefixes=IDEOGRAPH_PREFIXES):
	"""Build and write a table from the given (codepoint, names) entries into output_dir.
	Returns the TableInfo written as its manifest.
	Raises ValueError if the entries name a character differently to the rule that covers it,
	since those names could never be looked up."""
	entries = sorted(entries)
	ideographs = detect_ideographs(entries, prefixes)
	rules = RangeRules.from_config(ideographs)
	logger.info("Found ideograph ranges: {}".format(rules))

	stored = []
	for code, names in entries:
		if not rules.covers(code):
			stored.append((code, names))
			continue
		expected = rules.name(code)
		if names != [expected]:
			raise ValueError("Source names {:#x} {}, but it would be named {!r}".format(code, names, expected))

	records = encode_records(stored)
	blob = compress(records)
	logger.info("Encoded {} of {} characters as {} bytes, compressed to {}".format(
		len(stored), len(entries), len(records), len(blob),
	))

	info = TableInfo(len(blob), ideographs, version)
	if not os.path.isdir(output_dir):
		os.makedirs(output_dir)
	write_atomic(os.path.join(output_dir, info.resource), blob)
	write_atomic(os.path.join(output_dir, INFO_RESOURCE), json.dumps(info.to_json(), indent=1).encode('utf-8'))
	return info


def fetch_ucd(version, dest_dir, flavour='all'):
	"""Download the flat UCD xml for the given unicode version (eg. '15.1.0', or 'latest')
	into dest_dir, and return the path to it. flavour may be 'all' or 'nounihan'."""
	template = UCD_LATEST_URL if version == 'latest' else UCD_URL
	url = template.format(version=version, flavour=flavour)
	logger.info("Fetching {}".format(url))
	response = requests.get(url)
	response.raise_for_status()
	with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
		member = 'ucd.{}.flat.xml'.format(flavour)
		return archive.extract(member, dest_dir)


def build(output_dir, *, ucd=None, fetch=None, version=None):
	"""Build a name table into OUTPUT_DIR.
	Names are read from the UCD xml file given by --ucd, or downloaded for the unicode
	version given by --fetch, or by default taken from this interpreter's unicodedata.
	"""
	if fetch:
		with tempfile.TemporaryDirectory() as tmpdir:
			entries = list(ucd_entries(fetch_ucd(fetch, tmpdir)))
		version = version or fetch
	elif ucd:
		entries = ucd_entries(ucd)
	else:
		entries = unicodedata_entries()
		version = version or unicodedata.unidata_version
	info = build_table(entries, output_dir, version)
	return "Wrote {!r}".format(info)
