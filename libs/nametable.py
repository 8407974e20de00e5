
"""Streaming lookups in a compressed unicode name table

The table is a raw deflate stream (no zlib or gzip header) of records, each one
starting with a single byte:
	0-90: A name of that many bytes follows. The name belongs to the current codepoint,
	      then the current codepoint advances by one.
	91-254: One more byte E follows. Advance the current codepoint by (byte - 91) * 256 + E
	        without naming anything.
	255: Step the current codepoint back by one, so the next name is an alias for
	     the codepoint that was just named.
The current codepoint starts at 0, and names come in ascending codepoint order with the
canonical name of a codepoint first.

Rather than decompressing the whole table (or indexing it), every lookup decompresses it
again a chunk at a time and walks the records from the start. This is slower than an index
but memory use stays at the size of the compressed table plus one chunk buffer.
"""

import json
import logging
import os
import zlib


NAME_MAX = 90
SKIP_MIN = 91
SKIP_MAX = 254
ALIAS = 255
SKIP_LIMIT = (SKIP_MAX - SKIP_MIN) * 256 + 255 # largest gap a single skip record covers

CHUNK_SIZE = 4096
MIN_CHUNK_SIZE = 512

DATA_RESOURCE = 'names.data'
INFO_RESOURCE = 'names.json'

# scanner states
AWAIT_RECORD = 'record'
AWAIT_SKIP_LOW = 'skip'
IN_NAME = 'name'


class NameMapError(Exception):
	"""Base class for all errors raised by name lookups"""


class DatabaseUnavailable(NameMapError):
	"""The name table or its manifest could not be read"""


class DatabaseCorrupt(NameMapError):
	"""The name table could not be decompressed, or is not a valid record stream"""


class DirectoryProvider(object):
	"""Serves table resources as files in a directory"""

	def __init__(self, path):
		self.path = os.path.expanduser(path)

	def __repr__(self):
		return "<{} {!r}>".format(type(self).__name__, self.path)

	def open(self, name):
		return open(os.path.join(self.path, name), 'rb')


class TableInfo(object):
	"""Describes a compressed table: which unicode version it was built from,
	the name and exact length of its resource, and the ideograph intervals
	that were left out of it (as [[prefix, [[first, last], ...]], ...])."""

	def __init__(self, length, ideographs, version=None, resource=DATA_RESOURCE):
		self.length = length
		self.ideographs = ideographs
		self.version = version
		self.resource = resource

	def __repr__(self):
		return "<{} {} {!r}, {} bytes>".format(type(self).__name__, self.version, self.resource, self.length)

	@classmethod
	def from_json(cls, data):
		return cls(
			length=data['length'],
			ideographs=data['ideographs'],
			version=data.get('unicode_version'),
			resource=data.get('resource', DATA_RESOURCE),
		)

	def to_json(self):
		return {
			'unicode_version': self.version,
			'resource': self.resource,
			'length': self.length,
			'ideographs': self.ideographs,
		}


def load_info(provider, name=INFO_RESOURCE):
	"""Read a TableInfo from its manifest resource, or raise DatabaseUnavailable"""
	try:
		with provider.open(name) as f:
			data = json.loads(f.read().decode('utf-8'))
		return TableInfo.from_json(data)
	except (IOError, OSError, ValueError, KeyError, TypeError) as e:
		raise DatabaseUnavailable("Failed to read table manifest {!r} from {!r}: {}".format(name, provider, e)) from e


class CompressedTable(object):
	"""Holds the compressed table, which is read from the provider on first use and then
	kept for the lifetime of this object.
	Safe to share between threads without a lock: if several load it at once, each reads the resource
	and stores its own copy, so a later load may replace an earlier one. Only complete and
	validated copies are ever stored.
	"""
	_blob = None

	def __init__(self, provider, info, logger=None):
		self.provider = provider
		self.info = info
		self.logger = logger or logging.getLogger('uninames').getChild('table')

	def __repr__(self):
		return "<{} {!r} from {!r}{}>".format(
			type(self).__name__, self.info.resource, self.provider,
			"" if self._blob is None else " (loaded)",
		)

	@property
	def loaded(self):
		return self._blob is not None

	def get(self):
		"""Returns the compressed table as bytes, loading it if needed.
		Raises DatabaseUnavailable if it cannot be loaded, in which case a later call will try again."""
		blob = self._blob
		if blob is None:
			blob = self._load()
			if self._blob is None:
				self._blob = blob
			blob = self._blob
		return blob

	def _load(self):
		expected = self.info.length
		self.logger.debug("Loading {} bytes of name table from {!r}".format(expected, self.provider))
		buf = bytearray(expected)
		view = memoryview(buf)
		got = 0
		try:
			with self.provider.open(self.info.resource) as f:
				while got < expected:
					n = f.readinto(view[got:])
					if not n:
						break
					got += n
				extra = f.read(1) if got == expected else b''
		except (IOError, OSError) as e:
			raise DatabaseUnavailable("Failed to read name table {!r} from {!r}: {}".format(
			                          self.info.resource, self.provider, e)) from e
		if got != expected or extra:
			raise DatabaseUnavailable("Name table {!r} from {!r} is {} bytes, expected {}".format(
			                          self.info.resource, self.provider,
			                          "more than {}".format(got) if extra else got, expected))
		return bytes(buf)

	def open(self, chunk_size=CHUNK_SIZE):
		"""Returns a new StreamingDecoder over the table"""
		return StreamingDecoder(self.get(), chunk_size)


class StreamingDecoder(object):
	"""Decompresses a raw deflate stream one chunk at a time into a single reused buffer.
	Each pull() overwrites buffer, so its contents must be used before pulling again.
	"""

	def __init__(self, blob, chunk_size=CHUNK_SIZE):
		if chunk_size < MIN_CHUNK_SIZE:
			raise ValueError("chunk_size must be at least {}, not {}".format(MIN_CHUNK_SIZE, chunk_size))
		self.buffer = bytearray(chunk_size)
		self._inflater = zlib.decompressobj(-zlib.MAX_WBITS)
		self._pending = blob

	def pull(self):
		"""Decompress up to len(buffer) bytes into buffer and return how many.
		Returns 0 once the end of the compressed stream is reached.
		Raises DatabaseCorrupt if the stream is damaged or ends early."""
		inflater = self._inflater
		if inflater.eof:
			return 0
		try:
			data = inflater.decompress(self._pending, len(self.buffer))
		except zlib.error as e:
			raise DatabaseCorrupt("Failed to decompress name table: {}".format(e)) from e
		self._pending = inflater.unconsumed_tail
		if inflater.eof and inflater.unused_data:
			raise DatabaseCorrupt("Name table has {} bytes after the end of its compressed stream".format(
			                      len(inflater.unused_data)))
		if not data and not inflater.eof:
			# all input consumed and no output possible: the stream was cut short
			raise DatabaseCorrupt("Name table ended before the end of its compressed stream")
		self.buffer[:len(data)] = data
		return len(data)


class _CodeMatch(object):
	"""Matches name records against a target name"""
	def __init__(self, target):
		self.target = target
	def passed(self, cursor):
		return False
	def start(self, cursor, length):
		self.matched = 0 if length == len(self.target) else None
	def feed(self, data):
		if self.matched is None:
			return
		end = self.matched + len(data)
		if data == self.target[self.matched:end]:
			self.matched = end
		else:
			self.matched = None
	def end(self, cursor):
		if self.matched is not None:
			return cursor


class _NameMatch(object):
	"""Collects the first name record for a target codepoint"""
	def __init__(self, target):
		self.target = target
		self.collected = None
	def passed(self, cursor):
		# names are in ascending order, so nothing later can match
		return cursor > self.target
	def start(self, cursor, length):
		self.collected = bytearray() if cursor == self.target else None
	def feed(self, data):
		if self.collected is not None:
			self.collected.extend(data)
	def end(self, cursor):
		if self.collected is not None:
			try:
				return self.collected.decode('ascii')
			except UnicodeDecodeError as e:
				raise DatabaseCorrupt("Name record for U+{:04X} is not ascii".format(cursor)) from e


class TableScanner(object):
	"""Walks the records of a table from the start, resuming across chunk boundaries.
	Each scanner is good for one lookup, since it consumes its decoder.
	"""

	def __init__(self, decoder):
		self.decoder = decoder

	def lookup_code(self, name):
		"""Return the codepoint with the given name (as bytes), or None if there isn't one."""
		return self._walk(_CodeMatch(bytes(name)))

	def lookup_name(self, code):
		"""Return the first (canonical) name for codepoint code, or None if there isn't one."""
		return self._walk(_NameMatch(code))

	def _walk(self, match):
		decoder = self.decoder
		view = memoryview(decoder.buffer)
		cursor = 0
		state = AWAIT_RECORD
		gap = 0 # skip record high part, while awaiting its low byte
		remaining = 0 # bytes of the current name record not yet read
		while True:
			n = decoder.pull()
			if not n:
				if state != AWAIT_RECORD:
					raise DatabaseCorrupt("Name table ended inside a {} record at codepoint {:#x}".format(state, cursor))
				return None
			pos = 0
			while pos < n:
				if state == AWAIT_RECORD:
					if match.passed(cursor):
						return None
					byte = view[pos]
					pos += 1
					if byte == ALIAS:
						cursor -= 1
					elif byte >= SKIP_MIN:
						gap = (byte - SKIP_MIN) * 256
						state = AWAIT_SKIP_LOW
					else:
						match.start(cursor, byte)
						remaining = byte
						state = IN_NAME
				elif state == AWAIT_SKIP_LOW:
					cursor += gap + view[pos]
					pos += 1
					state = AWAIT_RECORD
				else:
					take = min(remaining, n - pos)
					match.feed(view[pos:pos + take])
					pos += take
					remaining -= take
				if state == IN_NAME and not remaining:
					result = match.end(cursor)
					if result is not None:
						return result
					cursor += 1
					state = AWAIT_RECORD
