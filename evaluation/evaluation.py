#!/usr/bin/env python3
"""
Evaluation runner for the Huffman compressor.

This evaluation script:
- Compresses and decompresses a fixed set of generated corpora
- Checks every round trip reproduces its input exactly
- Generates a structured JSON report with sizes, ratios, timings and environment metadata

Run with:
    python evaluation/evaluation.py [options]
"""
import sys
import json
import uuid
import time
import random
import logging
import platform
import subprocess
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from huffman_errors import HuffException
from huffman_service import DEBUG_HIGH, DEBUG_LOW, HuffmanService


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_git_info():
    """Get git commit and branch information."""
    git_info = {"git_commit": "unknown", "git_branch": "unknown"}
    commands = {
        "git_commit": ["git", "rev-parse", "HEAD"],
        "git_branch": ["git", "rev-parse", "--abbrev-ref", "HEAD"],
    }
    for key, cmd in commands.items():
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=str(PROJECT_ROOT),
                timeout=5
            )
        except (OSError, subprocess.SubprocessError):
            continue
        if result.returncode == 0:
            value = result.stdout.strip()
            git_info[key] = value[:8] if key == "git_commit" else value

    return git_info


def get_environment_info():
    """Collect environment information for the report."""
    git_info = get_git_info()

    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "os_release": platform.release(),
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "git_commit": git_info["git_commit"],
        "git_branch": git_info["git_branch"],
    }


def build_corpora(seed):
    """
    Build the named inputs the evaluation runs over.

    Args:
        seed: Seed for the random corpora so reports are comparable between runs

    Returns:
        dict mapping corpus name to bytes
    """
    rng = random.Random(seed)
    words = [b"huffman", b"tree", b"code", b"the", b"a", b"of", b"sentinel", b"header", b"bit"]
    text = b" ".join(rng.choice(words) for _ in range(20000))

    return {
        "empty": b"",
        "single_byte": b"x",
        "repeated_byte": b"A" * 1000,
        "all_byte_values": bytes(range(256)),
        "two_symbols": bytes(rng.choice(b"01") for _ in range(20000)),
        "word_text": text,
        "log_lines": b"".join(
            b"2024-01-%02d INFO request id=%d status=%d\n" % (rng.randint(1, 28), rng.randint(1, 9999), rng.choice((200, 404, 500)))
            for _ in range(2000)
        ),
        "random_64kb": bytes(rng.getrandbits(8) for _ in range(64 * 1024)),
    }


def run_corpus(service, name, data):
    """Compress and decompress one corpus, returning its result record."""
    t0 = time.perf_counter()
    compressed = service.compress(data)
    t1 = time.perf_counter()
    try:
        restored = service.decompress(compressed)
        error = None
    except HuffException as e:
        restored = None
        error = str(e)
    t2 = time.perf_counter()

    outcome = "passed" if restored == data else "failed"
    ratio = len(compressed) / len(data) if data else None

    status_icon = "✅" if outcome == "passed" else "❌"
    ratio_text = f"{ratio:.3f}" if ratio is not None else "n/a"
    print(f"  {status_icon} {name}: {len(data)} -> {len(compressed)} bytes (ratio {ratio_text})")

    return {
        "name": name,
        "outcome": outcome,
        "original_bytes": len(data),
        "compressed_bytes": len(compressed),
        "ratio": ratio,
        "compress_seconds": round(t1 - t0, 6),
        "decompress_seconds": round(t2 - t1, 6),
        "error": error,
    }


def run_evaluation(seed=0, debug=0):
    """
    Run the round trip over every corpus.

    Returns dict with per-corpus results and a summary.
    """
    print(f"\n{'=' * 60}")
    print("HUFFMAN ROUND-TRIP EVALUATION")
    print(f"{'=' * 60}")

    service = HuffmanService(debug=debug)
    corpora = build_corpora(seed)
    results = [run_corpus(service, name, data) for name, data in corpora.items()]

    passed = sum(1 for r in results if r["outcome"] == "passed")
    failed = len(results) - passed
    original = sum(r["original_bytes"] for r in results)
    compressed = sum(r["compressed_bytes"] for r in results)

    print(f"\nResults: {passed} passed, {failed} failed (total: {len(results)})")
    print(f"Overall: {original} -> {compressed} bytes")

    return {
        "success": failed == 0,
        "seed": seed,
        "corpora": results,
        "summary": {
            "total": len(results),
            "passed": passed,
            "failed": failed,
            "original_bytes": original,
            "compressed_bytes": compressed,
        },
    }


def generate_output_path():
    """Generate output path in format: evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    date_str = now.strftime("%Y-%m-%d")
    time_str = now.strftime("%H-%M-%S")

    output_dir = PROJECT_ROOT / "evaluation" / date_str / time_str
    output_dir.mkdir(parents=True, exist_ok=True)

    return output_dir / "report.json"


def main():
    """Main entry point for evaluation."""
    import argparse

    parser = argparse.ArgumentParser(description="Run Huffman round-trip evaluation")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)"
    )
    parser.add_argument("--seed", type=int, default=0, help="Seed for the generated corpora")
    parser.add_argument(
        "--debug",
        choices=("off", "low", "high"),
        default="off",
        help="Compressor debug level; low logs bit accounting, high also logs every code"
    )

    args = parser.parse_args()
    debug = {"off": 0, "low": DEBUG_LOW, "high": DEBUG_HIGH}[args.debug]
    logging.basicConfig(
        level=logging.DEBUG if debug >= DEBUG_HIGH else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    run_id = generate_run_id()
    started_at = datetime.now()

    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    results = run_evaluation(seed=args.seed, debug=debug)
    success = results["success"]

    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": success,
        "error": None if success else "Some corpora did not round-trip",
        "environment": get_environment_info(),
        "results": results,
    }

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = generate_output_path()

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\n✅ Report saved to: {output_path}")

    print(f"\n{'=' * 60}")
    print("EVALUATION COMPLETE")
    print(f"{'=' * 60}")
    print(f"Run ID: {run_id}")
    print(f"Duration: {duration:.2f}s")
    print(f"Success: {'✅ YES' if success else '❌ NO'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
