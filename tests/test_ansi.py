"""Regression tests for escape-aware line measurement and cropping.

Styling runs must stay zero-width and must never be split, otherwise
horizontal scrolling either misaligns columns or bleeds raw escape bytes.
"""

import unittest

from grain import ansi as ansi_mod

RED = "\x1b[31m"
RESET = "\x1b[0m"


class VisualWidthTests(unittest.TestCase):
    def test_plain_line_counts_every_character(self) -> None:
        self.assertEqual(ansi_mod.visual_width("hello"), 5)
        self.assertEqual(ansi_mod.visual_width(""), 0)

    def test_escape_runs_are_zero_width(self) -> None:
        self.assertEqual(ansi_mod.visual_width(f"{RED}err{RESET}"), 3)
        self.assertEqual(ansi_mod.visual_width(f"a{RED}{RESET}b"), 2)

    def test_unterminated_escape_at_end_is_not_counted(self) -> None:
        self.assertEqual(ansi_mod.visual_width("ab\x1b[31"), 2)

    def test_max_visual_width_handles_empty_sequence(self) -> None:
        self.assertEqual(ansi_mod.max_visual_width([]), 0)
        self.assertEqual(ansi_mod.max_visual_width(["a", f"{RED}bbb{RESET}", "cc"]), 3)


class CropFromColumnTests(unittest.TestCase):
    def test_column_zero_returns_line_unchanged(self) -> None:
        line = f"{RED}abc{RESET}"
        self.assertIs(ansi_mod.crop_from_column(line, 0), line)

    def test_plain_line_crops_to_suffix(self) -> None:
        line = "abcdef"
        for k in range(len(line)):
            self.assertEqual(ansi_mod.crop_from_column(line, k), line[k:])

    def test_styling_before_crop_point_is_kept(self) -> None:
        cropped = ansi_mod.crop_from_column(f"{RED}abcdef{RESET}", 3)
        self.assertEqual(cropped, f"{RED}def{RESET}")

    def test_escape_run_straddling_crop_point_is_copied_whole(self) -> None:
        cropped = ansi_mod.crop_from_column(f"ab{RED}cd{RESET}ef", 2)
        self.assertEqual(cropped, f"{RED}cd{RESET}ef")

    def test_crop_past_end_keeps_styling_only(self) -> None:
        line = f"{RED}abc{RESET}"
        for column in (3, 4, 50):
            cropped = ansi_mod.crop_from_column(line, column)
            self.assertEqual(ansi_mod.visual_width(cropped), 0)
            self.assertEqual(cropped, f"{RED}{RESET}")

    def test_crop_past_end_of_plain_line_returns_single_space(self) -> None:
        self.assertEqual(ansi_mod.crop_from_column("abc", 3), " ")
        self.assertEqual(ansi_mod.crop_from_column("abc", 10), " ")

    def test_empty_line_stays_empty(self) -> None:
        self.assertEqual(ansi_mod.crop_from_column("", 4), "")

    def test_open_escape_at_end_is_flushed(self) -> None:
        self.assertEqual(ansi_mod.crop_from_column("abcd\x1b[3", 2), "cd\x1b[3")

    def test_recropping_at_zero_is_idempotent(self) -> None:
        lines = ["abc", f"{RED}abc{RESET}", f"x{RED}yz", "", "\x1b[1mq"]
        for line in lines:
            for k in range(6):
                once = ansi_mod.crop_from_column(line, k)
                self.assertEqual(ansi_mod.crop_from_column(once, 0), once)


class ClipAndTabTests(unittest.TestCase):
    def test_clip_keeps_trailing_reset(self) -> None:
        self.assertEqual(ansi_mod.clip_to_width(f"{RED}abcdef{RESET}", 3), f"{RED}abc{RESET}")

    def test_clip_with_no_columns_is_empty(self) -> None:
        self.assertEqual(ansi_mod.clip_to_width("abc", 0), "")

    def test_clip_counts_wide_characters_as_two_cells(self) -> None:
        self.assertEqual(ansi_mod.clip_to_width("命令无输出命令无输出", 4), "命令")
        self.assertEqual(ansi_mod.clip_to_width("命令无输出", 5), "命令")
        self.assertEqual(ansi_mod.clip_to_width(f"a{RED}命令{RESET}", 4), f"a{RED}命{RESET}")

    def test_clip_treats_combining_marks_as_zero_width(self) -> None:
        self.assertEqual(ansi_mod.clip_to_width("e\u0301e\u0301x", 2), "e\u0301e\u0301")

    def test_char_display_width(self) -> None:
        self.assertEqual(ansi_mod.char_display_width("a"), 1)
        self.assertEqual(ansi_mod.char_display_width("命"), 2)
        self.assertEqual(ansi_mod.char_display_width("\uff21"), 2)
        self.assertEqual(ansi_mod.char_display_width("\u0301"), 0)

    def test_visual_width_still_counts_characters(self) -> None:
        self.assertEqual(ansi_mod.visual_width("命令"), 2)

    def test_expand_tabs_uses_visual_columns(self) -> None:
        self.assertEqual(ansi_mod.expand_tabs("ab\tc"), "ab      c")
        self.assertEqual(ansi_mod.expand_tabs(f"{RED}ab{RESET}\tc"), f"{RED}ab{RESET}      c")
        self.assertEqual(ansi_mod.visual_width(ansi_mod.expand_tabs("\t")), 8)

    def test_strip_sgr_removes_runs(self) -> None:
        self.assertEqual(ansi_mod.strip_sgr(f"{RED}  {RESET}"), "  ")
        self.assertEqual(ansi_mod.strip_sgr("plain"), "plain")


if __name__ == "__main__":
    unittest.main()
