import unicodedata
from unittest import TestCase, main

from unirange import (
	IDEOGRAPH_RANGES, S_BASE, S_COUNT, IdeographRule, RangeRules, SyllableRule,
)


class IdeographRuleTests(TestCase):

	def setUp(self):
		self.rule = IdeographRule()

	def test_name(self):
		self.assertEqual(self.rule.name(0x4E2D), 'CJK UNIFIED IDEOGRAPH-4E2D')
		self.assertEqual(self.rule.name(0x3400), 'CJK UNIFIED IDEOGRAPH-3400')
		self.assertIsNone(self.rule.name(0x9FA6))
		self.assertIsNone(self.rule.name(0x41))

	def test_code(self):
		self.assertEqual(self.rule.code('CJK UNIFIED IDEOGRAPH-4E2D'), 0x4E2D)
		self.assertEqual(self.rule.code('CJK UNIFIED IDEOGRAPH-4DB5'), 0x4DB5)

	def test_code_outside_ranges(self):
		self.assertIsNone(self.rule.code('CJK UNIFIED IDEOGRAPH-4DB6'))
		self.assertIsNone(self.rule.code('CJK UNIFIED IDEOGRAPH-20000'))

	def test_code_noncanonical(self):
		for name in ('CJK UNIFIED IDEOGRAPH-4e2d', 'CJK UNIFIED IDEOGRAPH-04E2D',
		             'CJK UNIFIED IDEOGRAPH-+4E2D', 'CJK UNIFIED IDEOGRAPH-', 'CJK UNIFIED IDEOGRAPH-XYZ',
		             'CJK UNIFIED IDEOGRAPH 4E2D', 'LATIN CAPITAL LETTER A'):
			self.assertIsNone(self.rule.code(name), name)

	def test_round_trip(self):
		for first, last in IDEOGRAPH_RANGES['3.0']:
			for code in range(first, last + 1):
				self.assertEqual(self.rule.code(self.rule.name(code)), code)

	def test_other_prefix(self):
		rule = IdeographRule('TANGUT IDEOGRAPH-', [(0x17000, 0x187F7)])
		self.assertEqual(rule.name(0x17000), 'TANGUT IDEOGRAPH-17000')
		self.assertEqual(rule.code('TANGUT IDEOGRAPH-187F7'), 0x187F7)
		self.assertIsNone(rule.code('CJK UNIFIED IDEOGRAPH-4E2D'))

	def test_overlapping(self):
		self.assertRaises(ValueError, lambda: IdeographRule(ranges=[(0x10, 0x20), (0x20, 0x30)]))


class SyllableRuleTests(TestCase):

	def setUp(self):
		self.rule = SyllableRule()

	def test_examples(self):
		self.assertEqual(self.rule.name(0xAC00), 'HANGUL SYLLABLE GA')
		self.assertEqual(self.rule.name(0xAC01), 'HANGUL SYLLABLE GAG')
		self.assertEqual(self.rule.name(0xC544), 'HANGUL SYLLABLE A')
		self.assertEqual(self.rule.name(0xD7A3), 'HANGUL SYLLABLE HIH')
		self.assertEqual(self.rule.code('HANGUL SYLLABLE GA'), 0xAC00)
		self.assertEqual(self.rule.code('HANGUL SYLLABLE A'), 0xC544)
		self.assertEqual(self.rule.code('HANGUL SYLLABLE HIH'), 0xD7A3)
		self.assertEqual(self.rule.name(0xB77C), 'HANGUL SYLLABLE RA')
		self.assertEqual(self.rule.code('HANGUL SYLLABLE RA'), 0xB77C)
		self.assertIsNone(self.rule.code('HANGUL SYLLABLE LA'))

	def test_longest_match(self):
		# GG must win over G, and YAE over YA
		self.assertEqual(self.rule.code('HANGUL SYLLABLE GGA'), 0xAE4C)
		self.assertEqual(self.rule.name(0xAE4C), 'HANGUL SYLLABLE GGA')
		self.assertEqual(self.rule.name(self.rule.code('HANGUL SYLLABLE GYAE')), 'HANGUL SYLLABLE GYAE')

	def test_outside(self):
		self.assertIsNone(self.rule.name(S_BASE - 1))
		self.assertIsNone(self.rule.name(S_BASE + S_COUNT))

	def test_bad_names(self):
		for name in ('HANGUL SYLLABLE ', 'HANGUL SYLLABLE G', 'HANGUL SYLLABLE GX',
		             'HANGUL SYLLABLE GAX', 'HANGUL SYLLABLE GAGGG', 'HANGUL SYLLABLES GA'):
			self.assertIsNone(self.rule.code(name), name)

	def test_all_syllables(self):
		self.assertEqual(S_COUNT, 11172)
		for code in range(S_BASE, S_BASE + S_COUNT):
			name = self.rule.name(code)
			self.assertEqual(name, unicodedata.name(chr(code)))
			self.assertEqual(self.rule.code(name), code)


class RangeRulesTests(TestCase):

	def test_defaults(self):
		rules = RangeRules()
		self.assertEqual(rules.name(0x4E2D), 'CJK UNIFIED IDEOGRAPH-4E2D')
		self.assertEqual(rules.code('HANGUL SYLLABLE GA'), 0xAC00)
		self.assertIsNone(rules.name(0x20A8))
		self.assertIsNone(rules.code('RUPEE SIGN'))
		self.assertTrue(rules.covers(0x3400))
		self.assertFalse(rules.covers(0x41))

	def test_versions(self):
		old = RangeRules.for_version('2.1')
		self.assertIsNone(old.name(0x3400))
		self.assertEqual(old.name(0x4E00), 'CJK UNIFIED IDEOGRAPH-4E00')
		self.assertEqual(RangeRules.for_version('3.0').name(0x3400), 'CJK UNIFIED IDEOGRAPH-3400')

	def test_config(self):
		config = [
			['CJK UNIFIED IDEOGRAPH-', [[0x4E00, 0x9FFF], [0x3400, 0x4DBF]]],
			['TANGUT IDEOGRAPH-', [[0x17000, 0x187F7]]],
		]
		rules = RangeRules.from_config(config)
		self.assertEqual(rules.name(0x9FFF), 'CJK UNIFIED IDEOGRAPH-9FFF')
		self.assertEqual(rules.code('TANGUT IDEOGRAPH-17001'), 0x17001)
		self.assertEqual(rules.name(0xAC00), 'HANGUL SYLLABLE GA')
		self.assertEqual(rules.to_config(), [
			['CJK UNIFIED IDEOGRAPH-', [[0x3400, 0x4DBF], [0x4E00, 0x9FFF]]],
			['TANGUT IDEOGRAPH-', [[0x17000, 0x187F7]]],
		])

	def test_empty_config(self):
		rules = RangeRules.from_config([])
		self.assertIsNone(rules.name(0x4E00))
		self.assertEqual(rules.name(0xAC00), 'HANGUL SYLLABLE GA')


if __name__ == '__main__':
	main()
