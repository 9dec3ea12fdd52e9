"""Tests for the command-line entry point."""
import io
import unittest
import tempfile
from contextlib import redirect_stdout
from decimal import Decimal
from pathlib import Path

from statementsense.export import to_json
from statementsense.llm.models import Transaction
from statementsense.main import main


class TestSummarizeCommand(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.export = Path(self.tmp.name) / "bank_analysis_2024-01-31.json"
        self.export.write_text(to_json([
            Transaction("2024-01-10", "Payroll", Decimal("2000"), "salary", ""),
            Transaction("2024-01-05", "Diner", Decimal("-50"), "dining", ""),
            Transaction("2024-01-05", "Market", Decimal("-20"), "groceries", ""),
        ]), encoding="utf-8")

    def tearDown(self):
        self.tmp.cleanup()

    def test_prints_summary(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            main(["summarize", str(self.export)])

        self.assertEqual(ctx.exception.code, 0)
        text = out.getvalue()
        self.assertIn("Loaded 3 transactions", text)
        self.assertIn("1,930.00", text)
        self.assertIn("dining", text)

    def test_missing_file_exits_with_error(self):
        with self.assertRaises(SystemExit) as ctx:
            main(["summarize", str(Path(self.tmp.name) / "missing.json")])

        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
