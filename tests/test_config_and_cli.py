"""
Tests for configuration loading and the command-line entry point.
"""

import json
import logging
from pathlib import Path

import pytest

from config import CONFIG_ENV_VAR, ConfigurationManager, get_config
from expense_scanner.assembler import ExpenseAssembler
from expense_scanner.input_handler import InputHandler
from expense_scanner.parsing import HeuristicParser
from expense_scanner.postprocessor import DateNormalizer
from expense_scanner.utils.logger import ROOT_LOGGER_NAME
from conftest import make_pdf

import main


class TestConfiguration:
    """settings.yaml values and overrides."""

    def test_defaults(self):
        assert get_config("parsing.amount.max") == 10000
        assert get_config("postprocessing.date.numeric_order") == "european"
        assert get_config("missing.key", "fallback") == "fallback"

    def test_env_var_override(self, tmp_path, monkeypatch):
        settings = tmp_path / "settings.yaml"
        settings.write_text(
            "parsing:\n"
            "  amount:\n"
            "    min: 0\n"
            "    max: 50\n"
            "postprocessing:\n"
            "  date:\n"
            "    numeric_order: us\n",
            encoding="utf-8"
        )
        monkeypatch.setenv(CONFIG_ENV_VAR, str(settings))
        ConfigurationManager.reset()

        parser = HeuristicParser()
        assert [c.value for c in parser.find_amounts("$20.00 and $80.00")] == ["20.00"]
        assert DateNormalizer().normalize("05/06/2024") == "2024-05-06"

    def test_site_file_keeps_unlisted_defaults(self, tmp_path):
        settings = tmp_path / "site.yaml"
        settings.write_text("parsing:\n  amount:\n    max: 500\n", encoding="utf-8")

        config = ConfigurationManager(str(settings))

        assert config.config_path == settings
        assert config.get("parsing.amount.max") == 500
        assert config.get("parsing.amount.min") == 0
        assert config.get("ocr.tesseract.lang") == "eng"

    def test_missing_site_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigurationManager(str(tmp_path / "absent.yaml"))

    def test_site_file_must_be_mapping(self, tmp_path):
        settings = tmp_path / "list.yaml"
        settings.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ValueError):
            ConfigurationManager(str(settings))

    def test_singleton(self):
        assert ConfigurationManager() is ConfigurationManager()


class TestCommandLine:
    """main.py processes files and writes JSON results."""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        yield
        app_logger = logging.getLogger(ROOT_LOGGER_NAME)
        app_logger.handlers.clear()
        app_logger.setLevel(logging.NOTSET)
        app_logger.propagate = True

    def test_single_pdf(self, tmp_path):
        source = tmp_path / "invoice.pdf"
        source.write_bytes(make_pdf(["ACME SUPPLIES LTD\nInvoice 55\nAmount: 120.00"]))
        output = tmp_path / "out" / "records.json"

        exit_code = main.main(["--input", str(source), "--output", str(output), "--quiet"])

        assert exit_code == 0
        results = json.loads(output.read_text(encoding="utf-8"))
        assert results[0]["success"] is True
        assert results[0]["records"][0]["amount"] == "120.00"
        assert results[0]["records"][0]["source"] == "document_scan"

    def test_directory_with_only_failures(self, tmp_path):
        (tmp_path / "locked.pdf").write_bytes(make_pdf(["Total 1.00"], encrypted=True))
        (tmp_path / "ignored.txt").write_text("not a document")
        output = tmp_path / "records.json"

        exit_code = main.main(["--input", str(tmp_path), "--output", str(output), "--quiet"])

        assert exit_code == 1
        results = json.loads(output.read_text(encoding="utf-8"))
        assert len(results) == 1
        assert results[0]["failure"] == "pdf_parse_failure"

    def test_directory_documents_loaded_one_at_a_time(self, tmp_path, monkeypatch):
        for name in ("a.pdf", "b.pdf"):
            (tmp_path / name).write_bytes(make_pdf([f"Total 1.00 {name}"]))
        events = []
        original_load = InputHandler.load
        original_run = ExpenseAssembler.run

        def load(self, filepath):
            events.append(("load", Path(filepath).name))
            return original_load(self, filepath)

        def run(self, document):
            events.append(("run", document.filename))
            return original_run(self, document)

        monkeypatch.setattr(InputHandler, "load", load)
        monkeypatch.setattr(ExpenseAssembler, "run", run)

        results = main.run_extraction(str(tmp_path))

        assert len(results) == 2
        assert events == [
            ("load", "a.pdf"), ("run", "a.pdf"),
            ("load", "b.pdf"), ("run", "b.pdf"),
        ]

    def test_missing_input(self, tmp_path):
        exit_code = main.main(["--input", str(tmp_path / "nope.pdf"), "--quiet"])
        assert exit_code == 1
