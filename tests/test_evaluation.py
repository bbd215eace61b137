import json
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from evaluation import evaluation
from huffman_service import HuffmanService


def test_corpora_are_reproducible():
	assert evaluation.build_corpora(5) == evaluation.build_corpora(5)
	assert evaluation.build_corpora(5)["empty"] == b""


def test_run_corpus_record():
	record = evaluation.run_corpus(HuffmanService(), "repeated", b"A" * 1000)
	assert record["outcome"] == "passed"
	assert record["original_bytes"] == 1000
	assert record["compressed_bytes"] < 1000
	assert record["error"] is None


def test_run_corpus_empty_has_no_ratio():
	record = evaluation.run_corpus(HuffmanService(), "empty", b"")
	assert record["outcome"] == "passed"
	assert record["ratio"] is None


def test_run_evaluation_all_pass():
	results = evaluation.run_evaluation(seed=1)
	assert results["success"]
	assert results["summary"]["failed"] == 0
	assert results["summary"]["total"] == len(results["corpora"])


def test_main_writes_report(tmp_path, monkeypatch):
	output = tmp_path / "report.json"
	monkeypatch.setattr(sys, "argv", ["evaluation.py", "--output", str(output), "--seed", "2"])
	assert evaluation.main() == 0
	report = json.loads(output.read_text())
	assert report["success"] is True
	assert report["results"]["seed"] == 2
	assert "python_version" in report["environment"]
