import unittest

from voicepos.agent.voice_parser import NUMBER_WORDS, extract_quantity, parse_voice_command


class VoiceParserTest(unittest.TestCase):
    def test_number_word_quantity(self):
        command = parse_voice_command("two milk")
        self.assertEqual(command.quantity, 2)
        self.assertEqual(command.product_query, "milk")

    def test_digit_quantity_keeps_multiword_phrase(self):
        command = parse_voice_command("3 coca cola")
        self.assertEqual(command.quantity, 3)
        self.assertEqual(command.product_query, "coca cola")

    def test_defaults_to_one_and_strips_verb(self):
        command = parse_voice_command("Add Bread")
        self.assertEqual(command.quantity, 1)
        self.assertEqual(command.product_query, "bread")

    def test_verb_after_quantity_is_stripped(self):
        command = parse_voice_command("five buy sugar")
        self.assertEqual(command.quantity, 5)
        self.assertEqual(command.product_query, "sugar")

    def test_only_one_leading_verb_is_stripped(self):
        command = parse_voice_command("get add milk")
        self.assertEqual(command.product_query, "add milk")

    def test_verb_must_be_a_whole_word(self):
        command = parse_voice_command("getaway chips")
        self.assertEqual(command.product_query, "getaway chips")

    def test_bare_verb_leaves_empty_phrase(self):
        self.assertEqual(parse_voice_command("buy").product_query, "")
        command = parse_voice_command("two get")
        self.assertEqual(command.quantity, 2)
        self.assertEqual(command.product_query, "")

    def test_quantity_only_looked_for_in_first_token(self):
        command = parse_voice_command("add three milk")
        self.assertEqual(command.quantity, 1)
        self.assertEqual(command.product_query, "three milk")

    def test_extra_whitespace_collapses(self):
        command = parse_voice_command("  twenty   bottled   water ")
        self.assertEqual(command.quantity, 20)
        self.assertEqual(command.product_query, "bottled water")

    def test_zero_is_parsed_as_zero(self):
        self.assertEqual(parse_voice_command("0 milk").quantity, 0)

    def test_empty_utterance(self):
        command = parse_voice_command("   ")
        self.assertEqual(command.quantity, 1)
        self.assertEqual(command.product_query, "")

    def test_number_only(self):
        command = parse_voice_command("two")
        self.assertEqual(command.quantity, 2)
        self.assertEqual(command.product_query, "")

    def test_number_words_table(self):
        self.assertEqual(len(NUMBER_WORDS), 20)
        self.assertEqual(extract_quantity("twelve"), 12)
        self.assertIsNone(extract_quantity("dozen"))
        self.assertIsNone(extract_quantity("²"))


if __name__ == "__main__":
    unittest.main()
