
"""Closed-form names for the large algorithmically-named ranges of unicode

Two kinds of range need no stored names at all:
	Ideographs, whose names are a fixed prefix followed by the character's own
	code in uppercase hex (eg. "CJK UNIFIED IDEOGRAPH-4E2D").
	Hangul syllables, whose names are composed from the short names of their
	leading, vowel and trailing jamo (eg. "HANGUL SYLLABLE GAG").

Which ideograph intervals are covered changes between unicode versions, so they are
configuration (see IDEOGRAPH_RANGES and RangeRules.from_config()), not constants.
"""


IDEOGRAPH_PREFIX = 'CJK UNIFIED IDEOGRAPH-'
SYLLABLE_PREFIX = 'HANGUL SYLLABLE '

# Known generations of unified ideograph intervals, inclusive
IDEOGRAPH_RANGES = {
	'2.1': [(0x4E00, 0x9FA5)],
	'3.0': [(0x3400, 0x4DB5), (0x4E00, 0x9FA5)],
}

# Short names of the leading (choseong), vowel (jungseong) and trailing (jongseong) jamo
LEADS = (
	"G", "GG", "N", "D", "DD", "R", "M", "B", "BB", "S", "SS", "", "J", "JJ",
	"C", "K", "T", "P", "H",
)
VOWELS = (
	"A", "AE", "YA", "YAE", "EO", "E", "YEO", "YE", "O", "WA", "WAE", "OE", "YO",
	"U", "WEO", "WE", "WI", "YU", "EU", "YI", "I",
)
# T index 0 means no trailing jamo, so this is offset by one
TRAILS = (
	"G", "GG", "GS", "N", "NJ", "NH", "D", "L", "LG", "LM", "LB", "LS", "LT",
	"LP", "LH", "M", "B", "BS", "S", "SS", "NG", "J", "C", "K", "T", "P", "H",
)

S_BASE = 0xAC00
L_COUNT = len(LEADS)
V_COUNT = len(VOWELS)
T_COUNT = len(TRAILS) + 1
N_COUNT = V_COUNT * T_COUNT
S_COUNT = L_COUNT * N_COUNT # 11172


def _longest_prefix(text, options):
	"""Returns (index, length) of the longest option which text starts with,
	or (None, 0) if none do."""
	best, longest = None, -1
	for index, option in enumerate(options):
		if len(option) > longest and text.startswith(option):
			best, longest = index, len(option)
	return best, max(longest, 0)


class IdeographRule(object):
	"""Names of the form PREFIX + hex code, for codes within any of the given intervals."""

	def __init__(self, prefix=IDEOGRAPH_PREFIX, ranges=IDEOGRAPH_RANGES['3.0']):
		self.prefix = prefix
		self.ranges = sorted((int(first), int(last)) for first, last in ranges)
		for (_, last), (first, _) in zip(self.ranges, self.ranges[1:]):
			if first <= last:
				raise ValueError("Overlapping ideograph intervals for {!r}: {}".format(prefix, self.ranges))

	def __repr__(self):
		return "<{} {!r} {}>".format(
			type(self).__name__, self.prefix,
			", ".join("{:X}..{:X}".format(first, last) for first, last in self.ranges),
		)

	def covers(self, code):
		return any(first <= code <= last for first, last in self.ranges)

	def name(self, code):
		if self.covers(code):
			return "{}{:X}".format(self.prefix, code)

	def code(self, name):
		if not name.startswith(self.prefix):
			return None
		digits = name[len(self.prefix):]
		try:
			code = int(digits, 16)
		except ValueError:
			return None
		# only the canonical spelling is a name, eg. not "4e2d", "04E2D" or "+4E2D"
		if "{:X}".format(code) != digits:
			return None
		if self.covers(code):
			return code


class SyllableRule(object):
	"""Hangul syllable names, composed from the names of their jamo."""

	prefix = SYLLABLE_PREFIX
	ranges = [(S_BASE, S_BASE + S_COUNT - 1)]

	def __repr__(self):
		return "<{} {:X}..{:X}>".format(type(self).__name__, S_BASE, S_BASE + S_COUNT - 1)

	def covers(self, code):
		return S_BASE <= code < S_BASE + S_COUNT

	def name(self, code):
		if not self.covers(code):
			return None
		index = code - S_BASE
		l = index // N_COUNT
		v = (index % N_COUNT) // T_COUNT
		t = index % T_COUNT
		return self.prefix + LEADS[l] + VOWELS[v] + (TRAILS[t - 1] if t else "")

	def code(self, name):
		if not name.startswith(self.prefix):
			return None
		rest = name[len(self.prefix):]
		# LEADS contains "", so this stage always matches something
		l, length = _longest_prefix(rest, LEADS)
		rest = rest[length:]
		v, length = _longest_prefix(rest, VOWELS)
		if v is None:
			return None
		rest = rest[length:]
		if not rest:
			t = 0
		elif rest in TRAILS:
			t = TRAILS.index(rest) + 1
		else:
			return None
		return S_BASE + (l * V_COUNT + v) * T_COUNT + t


class RangeRules(object):
	"""The full set of algorithmic rules in effect for one version of the name table.
	Lookups return None where no rule applies, leaving it to the caller to consult
	the stored table."""

	def __init__(self, ideographs=None, syllables=True):
		"""ideographs is a list of IdeographRule, defaulting to the unicode 3.0
		unified ideographs. syllables enables the hangul syllable rule."""
		if ideographs is None:
			ideographs = [IdeographRule()]
		self.rules = list(ideographs)
		if syllables:
			self.rules.append(SyllableRule())

	@classmethod
	def for_version(cls, version):
		"""Rules for one of the known IDEOGRAPH_RANGES generations"""
		return cls([IdeographRule(IDEOGRAPH_PREFIX, IDEOGRAPH_RANGES[version])])

	@classmethod
	def from_config(cls, ideographs):
		"""Takes a list of [prefix, [[first, last], ...]] as stored in a table manifest"""
		return cls([IdeographRule(prefix, ranges) for prefix, ranges in ideographs])

	def to_config(self):
		"""Inverse of from_config()"""
		return [
			[rule.prefix, [[first, last] for first, last in rule.ranges]]
			for rule in self.rules if isinstance(rule, IdeographRule)
		]

	def __repr__(self):
		return "<{} {}>".format(type(self).__name__, self.rules)

	def covers(self, code):
		return any(rule.covers(code) for rule in self.rules)

	def name(self, code):
		for rule in self.rules:
			name = rule.name(code)
			if name is not None:
				return name

	def code(self, name):
		for rule in self.rules:
			code = rule.code(name)
			if code is not None:
				return code
