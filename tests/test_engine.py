import unittest
from datetime import datetime
from unittest import mock

from consolidator import models
from consolidator.engine import consolidate
from consolidator.errors import DecodeError, EmptyResultError
from consolidator.models import FileStatus, InputFile
from consolidator.strategies import CONCATENATE, EXTRACT, MERGE, get_strategy
from consolidator.workbook import decode
from tests.fixtures import queued, settings


def _rows(n, prefix="r"):
    return [[f"{prefix}{i}", i] for i in range(n)]


class DecodeTests(unittest.TestCase):
    def test_sheets_come_back_in_declared_order(self):
        entry = queued("book.xlsx", {"Zeta": [["z"]], "Alpha": [["a"]]})
        workbook = decode(entry.file)
        self.assertEqual(["Zeta", "Alpha"], list(workbook))

    def test_missing_cells_become_empty_strings(self):
        entry = queued("book.xlsx", {"S": [["a", None, "c"], ["d"]]})
        self.assertEqual([["a", "", "c"], ["d", "", ""]], decode(entry.file)["S"])

    def test_values_keep_their_types(self):
        when = datetime(2024, 1, 5)
        entry = queued("book.xlsx", {"S": [["text", 30, 1.5, when]]})
        row = decode(entry.file)["S"][0]
        self.assertEqual("text", row[0])
        self.assertEqual(30, row[1])
        self.assertEqual(1.5, row[2])
        self.assertIsInstance(row[3], datetime)
        self.assertEqual(when, row[3])

    def test_csv_is_one_sheet(self):
        workbook = decode(InputFile("data.csv", b"a,b\n1,\n"))
        self.assertEqual({"Sheet1": [["a", "b"], [1, ""]]}, workbook)

    def test_csv_rows_wider_than_the_first_are_kept(self):
        workbook = decode(InputFile("q.csv", b"x,y\na,b,c\n"))
        self.assertEqual([["x", "y", ""], ["a", "b", "c"]], workbook["Sheet1"])

    def test_csv_blank_lines_match_xlsx_blank_rows(self):
        from_csv = decode(InputFile("gap.csv", b"a,b\n\nc,d\n"))["Sheet1"]
        from_xlsx = decode(queued("gap.xlsx", {"S": [["a", "b"], [None, None], ["c", "d"]]}).file)["S"]

        self.assertEqual([["a", "b"], ["", ""], ["c", "d"]], from_csv)
        self.assertEqual(from_xlsx, from_csv)

    def test_csv_numbers_are_typed(self):
        grid = decode(InputFile("n.csv", b"Name,Age,Score,Code\nAnn,30,-1.5,A7\nBo,,2e3,007\n"))["Sheet1"]

        self.assertEqual(["Name", "Age", "Score", "Code"], grid[0])
        self.assertEqual(["Ann", 30, -1.5, "A7"], grid[1])
        self.assertIsInstance(grid[1][1], int)
        self.assertEqual(["Bo", "", 2000.0, 7], grid[2])

    def test_csv_formula_text_and_byte_order_mark(self):
        grid = decode(InputFile("f.csv", "\ufeffcalc\n=1+1\n".encode("utf-8")))["Sheet1"]
        self.assertEqual([["calc"], ["=1+1"]], grid)

    def test_csv_falls_back_to_latin1(self):
        workbook = decode(InputFile("data.csv", "name\ncafé\n".encode("latin-1")))
        self.assertEqual([["name"], ["café"]], workbook["Sheet1"])

    def test_empty_csv_has_no_rows(self):
        self.assertEqual({"Sheet1": []}, decode(InputFile("empty.csv", b"")))

    def test_garbage_raises_decode_error(self):
        with self.assertRaises(DecodeError) as ctx:
            decode(InputFile("broken.xlsx", b"definitely not a workbook"))
        self.assertEqual("broken.xlsx", ctx.exception.file_name)
        self.assertIn("broken.xlsx", str(ctx.exception))


class ConsolidateTests(unittest.TestCase):
    def test_row_count_is_sum_over_files_and_sheets(self):
        files = [
            queued("one.xlsx", {"A": _rows(2), "B": [], "C": _rows(5)}),
            queued("two.xlsx", {"Only": _rows(3)}),
        ]
        result = consolidate(files, get_strategy(CONCATENATE, settings()))

        self.assertEqual(10, result.total_rows)
        self.assertEqual(2, result.files_processed)
        self.assertEqual(7, files[0].row_count)
        self.assertEqual(3, files[1].row_count)
        self.assertEqual(["r0", 0, "one.xlsx", "A"], result.rows[0])
        self.assertEqual(["r2", 2, "two.xlsx", "Only"], result.rows[-1])

    def test_extract_adds_one_header_for_the_whole_run(self):
        row = list("abcdefghijklmno")
        files = [queued("a.xlsx", {"S1": [row], "S2": [row]}), queued("b.xlsx", {"S": [row]})]
        result = consolidate(files, get_strategy(EXTRACT, settings()))

        self.assertEqual(3, result.total_rows)
        self.assertEqual("Comments", result.header[-1])
        self.assertEqual(11, len(result.header))
        self.assertTrue(all(r == ["c", "d", "h", "i", "j", "k", "l", "m", "n", "o", ""] for r in result.rows))

    def test_merge_consumes_one_header_per_sheet(self):
        files = [
            queued("f.xlsx", {"S1": [["Name", "Age"], ["Ann", 30], ["Ben", 41]], "S2": [["Name"], ["Cy"]]}),
        ]
        result = consolidate(files, get_strategy(MERGE, settings()))

        self.assertEqual(3, result.total_rows)
        self.assertEqual(3, files[0].row_count)
        self.assertEqual({"Name": "Ann", "Age": 30, "source_file": "f.xlsx"}, result.rows[0])
        self.assertEqual({"Name": "Cy", "source_file": "f.xlsx"}, result.rows[2])

    def test_ragged_csv_is_concatenated_without_aborting(self):
        files = [FileStatus(file=InputFile("q.csv", b"x,y\na,b,c\n"))]
        result = consolidate(files, get_strategy(CONCATENATE, settings()))

        self.assertEqual(2, files[0].row_count)
        self.assertEqual(["a", "b", "c", "q.csv", "Sheet1"], result.rows[1])

    def test_merge_over_csv_keeps_numbers(self):
        files = [FileStatus(file=InputFile("f.csv", b"Name,Age\nAnn,30\n"))]
        result = consolidate(files, get_strategy(MERGE, settings()))
        self.assertEqual([{"Name": "Ann", "Age": 30, "source_file": "f.csv"}], result.rows)

    def test_empty_queue_fails(self):
        with self.assertRaises(EmptyResultError):
            consolidate([], get_strategy(CONCATENATE, settings()))

    def test_all_empty_sheets_fail(self):
        files = [queued("blank.xlsx", {"S1": [], "S2": []})]
        with self.assertRaises(EmptyResultError):
            consolidate(files, get_strategy(CONCATENATE, settings()))
        self.assertEqual(models.COMPLETED, files[0].status)
        self.assertEqual(0, files[0].row_count)

    def test_workbook_without_sheets_contributes_nothing(self):
        files = [queued("a.xlsx", {"S": _rows(1)}), queued("b.xlsx", {"S": _rows(1)})]
        real = {"S": [["x"]]}
        with mock.patch("consolidator.engine.decode", side_effect=[{}, real]):
            result = consolidate(files, get_strategy(CONCATENATE, settings()))
        self.assertEqual(0, files[0].row_count)
        self.assertEqual([["x", "b.xlsx", "S"]], result.rows)

    def test_bad_file_aborts_the_whole_run(self):
        good = queued("good.xlsx", {"S": _rows(2)})
        bad = FileStatus(file=InputFile("bad.xlsx", b"garbage"))
        later = queued("later.xlsx", {"S": _rows(2)})

        with self.assertRaises(DecodeError):
            consolidate([good, bad, later], get_strategy(CONCATENATE, settings()))

        self.assertEqual(models.COMPLETED, good.status)
        self.assertEqual(models.ERROR, bad.status)
        self.assertEqual(models.PENDING, later.status)
        self.assertIsNone(later.row_count)

    def test_status_updates_follow_queue_order(self):
        files = [queued(f"f{i}.xlsx", {"S": _rows(i + 1)}) for i in range(3)]
        seen = []

        def on_status(entry):
            seen.append((entry.name, entry.status, entry.row_count, [f.status for f in files]))

        consolidate(files, get_strategy(CONCATENATE, settings()), on_status=on_status)

        self.assertEqual(
            [
                ("f0.xlsx", models.PROCESSING, None),
                ("f0.xlsx", models.COMPLETED, 1),
                ("f1.xlsx", models.PROCESSING, None),
                ("f1.xlsx", models.COMPLETED, 2),
                ("f2.xlsx", models.PROCESSING, None),
                ("f2.xlsx", models.COMPLETED, 3),
            ],
            [s[:3] for s in seen],
        )
        # When the first file completes, the rest are still waiting
        self.assertEqual([models.COMPLETED, models.PENDING, models.PENDING], seen[1][3])


class ResultLayoutTests(unittest.TestCase):
    def test_divergent_headers_append_new_columns(self):
        files = [
            queued("a.xlsx", {"S": [["Name", "Age"], ["Ann", 30]]}),
            queued("b.xlsx", {"S": [["City", "Name"], ["Oslo", "Bo"]]}),
        ]
        result = consolidate(files, get_strategy(MERGE, settings()))
        frame = result.to_frame()

        self.assertEqual(["Name", "Age", "source_file", "City"], list(frame.columns))
        self.assertEqual("Oslo", frame.loc[1, "City"])
        self.assertTrue(frame.isna().loc[0, "City"])
        self.assertTrue(frame.isna().loc[1, "Age"])


if __name__ == "__main__":
    unittest.main()
