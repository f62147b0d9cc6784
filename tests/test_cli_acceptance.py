from __future__ import annotations

import io
import json
import logging
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from docmermaid import cli

LOADER = "https://unpkg.com/mermaid@7.1.2/dist/mermaid.min.js"


class CLIAcceptanceTests(unittest.TestCase):
    def run_cli(self, argv: list[str], stdin_text: str = "") -> tuple[int, str, str]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        stdin = io.StringIO(stdin_text)
        with mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", stderr), mock.patch("sys.stdin", stdin):
            code = cli.main(argv)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_requires_subcommand(self) -> None:
        code, _out, err = self.run_cli([])
        self.assertEqual(code, 2)
        self.assertIn("E_ARGS", err)
        self.assertIn("subcommand", err)

    def test_unknown_subcommand_is_usage_error(self) -> None:
        code, _out, err = self.run_cli(["bogus"])
        self.assertEqual(code, 2)
        self.assertIn("E_ARGS", err)

    def test_tag_from_text(self) -> None:
        code, out, err = self.run_cli(["tag", "--text", "Flow\nA-->B"])
        self.assertEqual(code, 0, err)
        self.assertEqual(out, '#### Flow \n\n <div class="mermaid">A-->B</div>\n')

    def test_tag_from_stdin(self) -> None:
        code, out, err = self.run_cli(["tag"], stdin_text="OnlyTitle")
        self.assertEqual(code, 0, err)
        self.assertEqual(out, '#### OnlyTitle \n\n <div class="mermaid"></div>\n')

    def test_tag_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            missing = Path(td) / "nope.txt"
            code, _out, err = self.run_cli(["--error-format", "json", "tag", str(missing)])
        self.assertEqual(code, 2)
        payload = json.loads(err.strip().splitlines()[-1])
        self.assertFalse(payload["ok"])
        self.assertEqual(payload["code"], "E_IO_READ")
        self.assertEqual(payload["file"], str(missing))

    def test_inject_text_to_stdout(self) -> None:
        code, out, err = self.run_cli(["inject", "--text", "<html><body>x</body></html>"])
        self.assertEqual(code, 0, err)
        self.assertEqual(out.count(LOADER), 1)
        self.assertEqual(out.count("</body>"), 1)

    def test_inject_rewrites_files_in_place(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            page = Path(td) / "index.html"
            page.write_text("<html><body>x</body></html>", encoding="utf-8")
            partial = Path(td) / "partial.html"
            partial.write_text("<div>x</div>", encoding="utf-8")

            code, out, err = self.run_cli(["inject", str(page), str(partial), "--mermaid-version", "9.4.3"])

            self.assertEqual(code, 0, err)
            self.assertIn(f"Wrote {page}", out)
            self.assertIn(f"Unchanged {partial}", out)
            self.assertIn("https://unpkg.com/mermaid@9.4.3/dist/mermaid.min.js", page.read_text(encoding="utf-8"))
            self.assertEqual(partial.read_text(encoding="utf-8"), "<div>x</div>")

    def test_inject_keeps_crlf_line_endings(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            page = Path(td) / "index.html"
            page.write_bytes(b"<html>\r\n<body>x</body>\r\n</html>\r\n")

            code, _out, err = self.run_cli(["inject", str(page)])

            self.assertEqual(code, 0, err)
            data = page.read_bytes()
            self.assertTrue(data.startswith(b"<html>\r\n<body>x"))
            self.assertTrue(data.endswith(b"\r\n</html>\r\n"))
            self.assertIn(LOADER.encode("utf-8"), data)

    def test_inject_rejects_non_utf8_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            page = Path(td) / "latin1.html"
            page.write_bytes(b"<body>caf\xe9</body>")

            code, _out, err = self.run_cli(["inject", str(page)])

            self.assertEqual(code, 2)
            self.assertIn("E_IO_READ", err)
            self.assertEqual(page.read_bytes(), b"<body>caf\xe9</body>")

    def test_unknown_log_level_falls_back_to_warning(self) -> None:
        with mock.patch.dict("os.environ", {"DOCMERMAID_LOG_LEVEL": "handlers"}), mock.patch(
            "logging.basicConfig"
        ) as basic_config:
            cli._configure_logging(False)
        self.assertEqual(basic_config.call_args.kwargs["level"], logging.WARNING)

    def test_log_level_from_environment(self) -> None:
        with mock.patch.dict("os.environ", {"DOCMERMAID_LOG_LEVEL": "info"}), mock.patch(
            "logging.basicConfig"
        ) as basic_config:
            cli._configure_logging(False)
        self.assertEqual(basic_config.call_args.kwargs["level"], logging.INFO)

    def test_inject_to_output_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            page = Path(td) / "index.html"
            page.write_text("<body></body>", encoding="utf-8")
            target = Path(td) / "out.html"

            code, _out, err = self.run_cli(["inject", str(page), "-o", str(target)])

            self.assertEqual(code, 0, err)
            self.assertEqual(page.read_text(encoding="utf-8"), "<body></body>")
            self.assertIn(LOADER, target.read_text(encoding="utf-8"))

    def test_inject_stdout_and_output_conflict(self) -> None:
        code, _out, err = self.run_cli(["inject", "--text", "<body></body>", "--stdout", "-o", "x.html"])
        self.assertEqual(code, 2)
        self.assertIn("mutually exclusive", err)

    def test_inject_output_with_many_inputs(self) -> None:
        code, _out, err = self.run_cli(["inject", "a.html", "b.html", "-o", "x.html"])
        self.assertEqual(code, 2)
        self.assertIn("single input", err)

    def test_snippet_prints_fragment(self) -> None:
        code, out, err = self.run_cli(["snippet", "--mermaid-version", "10.0.0"])
        self.assertEqual(code, 0, err)
        self.assertIn("https://unpkg.com/mermaid@10.0.0/dist/mermaid.min.js", out)
        self.assertIn("startOnLoad: true", out)
        self.assertIn("</body>", out)


if __name__ == "__main__":
    unittest.main()
