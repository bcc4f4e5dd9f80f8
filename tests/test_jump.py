"""Tests for mapping diff lines back to source lines.

Uses hand-written unified diffs so each hunk counter transition is explicit.
"""

from __future__ import annotations

import unittest

from lazydiff.jump import Jump, Side, find_jump, find_jump_new, find_jump_old

MINIMAL_DIFF = [
    "diff --git a/foo.txt b/foo.txt",
    "index 1111111..2222222 100644",
    "--- a/foo.txt",
    "+++ b/foo.txt",
    "@@ -1,2 +1,3 @@",
    " a",
    "+b",
    " c",
]

MULTI_FILE_DIFF = [
    "diff --git a/one.py b/one.py",
    "index 1111111..2222222 100644",
    "--- a/one.py",
    "+++ b/one.py",
    "@@ -3,4 +3,3 @@ def f():",
    " keep",
    "-gone",
    "-gone too",
    "+added",
    " tail",
    "@@ -20 +19,2 @@",
    "-old twenty",
    "+new nineteen",
    "+new twenty",
    "diff --git a/dir/two.py b/dir/two.py",
    "index 3333333..4444444 100644",
    "--- a/dir/two.py",
    "+++ b/dir/two.py",
    "@@ -10,2 +10,2 @@",
    " ten",
    "-eleven",
    "+ELEVEN",
]


class MinimalDiffTests(unittest.TestCase):
    def test_addition_maps_to_new_side(self) -> None:
        self.assertEqual(find_jump(MINIMAL_DIFF, 6, Side.NEW), Jump("foo.txt", 2))

    def test_addition_has_no_old_side(self) -> None:
        self.assertIsNone(find_jump(MINIMAL_DIFF, 6, Side.OLD))

    def test_context_maps_to_both_sides(self) -> None:
        self.assertEqual(find_jump(MINIMAL_DIFF, 5, Side.OLD), Jump("foo.txt", 1))
        self.assertEqual(find_jump(MINIMAL_DIFF, 5, Side.NEW), Jump("foo.txt", 1))
        self.assertEqual(find_jump(MINIMAL_DIFF, 7, Side.OLD), Jump("foo.txt", 2))
        self.assertEqual(find_jump(MINIMAL_DIFF, 7, Side.NEW), Jump("foo.txt", 3))

    def test_header_and_hunk_lines_never_map(self) -> None:
        for index in range(5):
            for side in Side:
                with self.subTest(index=index, side=side):
                    self.assertIsNone(find_jump(MINIMAL_DIFF, index, side))

    def test_out_of_range_index(self) -> None:
        self.assertIsNone(find_jump(MINIMAL_DIFF, -1, Side.NEW))
        self.assertIsNone(find_jump(MINIMAL_DIFF, len(MINIMAL_DIFF), Side.NEW))
        self.assertIsNone(find_jump([], 0, Side.OLD))

    def test_wrapper_argument_order(self) -> None:
        self.assertEqual(find_jump_old(5, MINIMAL_DIFF), Jump("foo.txt", 1))
        self.assertEqual(find_jump_new(6, MINIMAL_DIFF), Jump("foo.txt", 2))


class MultiHunkTests(unittest.TestCase):
    def test_removals_advance_only_old_counter(self) -> None:
        self.assertEqual(find_jump_old(6, MULTI_FILE_DIFF), Jump("one.py", 4))
        self.assertEqual(find_jump_old(7, MULTI_FILE_DIFF), Jump("one.py", 5))
        self.assertIsNone(find_jump_new(7, MULTI_FILE_DIFF))
        self.assertEqual(find_jump_new(8, MULTI_FILE_DIFF), Jump("one.py", 4))
        self.assertEqual(find_jump_old(9, MULTI_FILE_DIFF), Jump("one.py", 6))
        self.assertEqual(find_jump_new(9, MULTI_FILE_DIFF), Jump("one.py", 5))

    def test_hunk_header_resets_counters_and_defaults_count_to_one(self) -> None:
        self.assertIsNone(find_jump_old(10, MULTI_FILE_DIFF))
        self.assertEqual(find_jump_old(11, MULTI_FILE_DIFF), Jump("one.py", 20))
        self.assertEqual(find_jump_new(12, MULTI_FILE_DIFF), Jump("one.py", 19))
        self.assertEqual(find_jump_new(13, MULTI_FILE_DIFF), Jump("one.py", 20))

    def test_later_file_header_wins(self) -> None:
        self.assertIsNone(find_jump_new(14, MULTI_FILE_DIFF))
        self.assertIsNone(find_jump_old(16, MULTI_FILE_DIFF))
        self.assertEqual(find_jump_old(19, MULTI_FILE_DIFF), Jump("dir/two.py", 10))
        self.assertEqual(find_jump_old(20, MULTI_FILE_DIFF), Jump("dir/two.py", 11))
        self.assertEqual(find_jump_new(21, MULTI_FILE_DIFF), Jump("dir/two.py", 11))


class EdgeCaseTests(unittest.TestCase):
    def test_lines_before_any_header_do_not_map(self) -> None:
        content = ["+not a hunk", " nor this", "-nor that"]
        for index in range(len(content)):
            for side in Side:
                self.assertIsNone(find_jump(content, index, side))

    def test_hunk_without_file_header_has_no_path(self) -> None:
        content = ["@@ -1 +1 @@", "-a", "+b"]
        self.assertIsNone(find_jump_old(1, content))
        self.assertIsNone(find_jump_new(2, content))

    def test_removal_lines_that_look_like_headers_stay_in_hunk(self) -> None:
        content = [
            "--- a/x.txt",
            "+++ b/x.txt",
            "@@ -1,2 +1,2 @@",
            "--- not a header",
            "+++ not a header either",
            " same",
        ]
        self.assertEqual(find_jump_old(3, content), Jump("x.txt", 1))
        self.assertEqual(find_jump_new(4, content), Jump("x.txt", 1))
        self.assertEqual(find_jump_new(5, content), Jump("x.txt", 2))

    def test_no_newline_marker_is_unmapped(self) -> None:
        content = [
            "--- a/x.txt",
            "+++ b/x.txt",
            "@@ -1 +1 @@",
            "-old",
            "\\ No newline at end of file",
            "+new",
            "\\ No newline at end of file",
        ]
        self.assertIsNone(find_jump_old(4, content))
        self.assertEqual(find_jump_new(5, content), Jump("x.txt", 1))
        self.assertIsNone(find_jump_new(6, content))

    def test_new_file_has_no_old_side(self) -> None:
        content = [
            "diff --git a/new.txt b/new.txt",
            "new file mode 100644",
            "index 0000000..1111111",
            "--- /dev/null",
            "+++ b/new.txt",
            "@@ -0,0 +1,2 @@",
            "+one",
            "+two",
        ]
        self.assertEqual(find_jump_new(7, content), Jump("new.txt", 2))
        self.assertIsNone(find_jump_old(7, content))

    def test_deleted_file_has_no_new_side(self) -> None:
        content = [
            "--- a/old.txt",
            "+++ /dev/null",
            "@@ -1 +0,0 @@",
            "-only",
        ]
        self.assertEqual(find_jump_old(3, content), Jump("old.txt", 1))
        self.assertIsNone(find_jump_new(3, content))

    def test_rename_uses_each_side_path(self) -> None:
        content = [
            "diff --git a/old/name.py b/new/name.py",
            "similarity index 90%",
            "rename from old/name.py",
            "rename to new/name.py",
            "--- a/old/name.py",
            "+++ b/new/name.py",
            "@@ -5 +5 @@",
            " same",
        ]
        self.assertEqual(find_jump_old(7, content), Jump("old/name.py", 5))
        self.assertEqual(find_jump_new(7, content), Jump("new/name.py", 5))

    def test_quoted_paths_are_unquoted(self) -> None:
        content = [
            'diff --git "a/t\\303\\251st file.txt" "b/t\\303\\251st file.txt"',
            '--- "a/t\\303\\251st file.txt"',
            '+++ "b/t\\303\\251st file.txt"',
            "@@ -1 +1 @@",
            " x",
        ]
        self.assertEqual(find_jump_new(4, content), Jump("tést file.txt", 1))

    def test_timestamps_after_tab_are_ignored(self) -> None:
        content = [
            "--- a/x.txt\t2024-01-01 00:00:00.000000000 +0000",
            "+++ b/x.txt\t2024-01-02 00:00:00.000000000 +0000",
            "@@ -1 +1 @@",
            " x",
        ]
        self.assertEqual(find_jump_old(3, content), Jump("x.txt", 1))

    def test_empty_line_inside_hunk_is_context(self) -> None:
        content = ["--- a/x", "+++ b/x", "@@ -1,2 +1,2 @@", "", " y"]
        self.assertEqual(find_jump_new(3, content), Jump("x", 1))
        self.assertEqual(find_jump_new(4, content), Jump("x", 2))

    def test_paths_without_prefix_are_kept(self) -> None:
        content = ["--- x.txt", "+++ x.txt", "@@ -1 +1 @@", " x"]
        self.assertEqual(find_jump_old(3, content), Jump("x.txt", 1))


if __name__ == "__main__":
    unittest.main()
