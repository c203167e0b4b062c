#!/usr/bin/env python3
"""
Test Runner for the storefront backend

PURPOSE:
    Convenience wrapper around pytest for running the service, persistence
    and API suites separately or together.

USAGE:
    python tests/run_tests.py [options]

    Options:
    --services   Run order/product/workflow/tracking service tests
    --storage    Run local store, remote client and image storage tests
    --api        Run HTTP API and AI client tests
    --all        Run all available tests
    --coverage   Run tests with coverage reporting
    --verbose    Run with verbose output
"""

import sys
import subprocess
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

SUITES = {
    "services": (
        "Service Tests",
        ["tests/test_order_service.py", "tests/test_product_service.py",
         "tests/test_status_workflow.py", "tests/test_tracking.py"],
    ),
    "storage": (
        "Persistence Tests",
        ["tests/test_local_store.py", "tests/test_remote_client.py", "tests/test_storage_service.py"],
    ),
    "api": (
        "API Tests",
        ["tests/test_api.py", "tests/test_generate.py"],
    ),
    "all": ("All Tests", ["tests/"]),
}


def run_command(command, description):
    """Run a command and handle errors."""
    print(f"\n{'='*60}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(command)}")
    print(f"{'='*60}")

    try:
        subprocess.run(command, check=True, cwd=project_root)
        print(f"\n✅ {description} completed successfully!")
        return True
    except subprocess.CalledProcessError as e:
        print(f"\n❌ {description} failed with exit code {e.returncode}")
        return False


def run_suite(name, verbose=False, coverage=False):
    description, paths = SUITES[name]
    command = [sys.executable, "-m", "pytest", *paths]
    if verbose:
        command.append("-v")
    if coverage:
        command.extend(["--cov=storefront", "--cov-report=term-missing"])
    return run_command(command, description)


def main():
    """Main function to parse arguments and run tests."""
    parser = argparse.ArgumentParser(
        description="Test Runner for the storefront backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tests/run_tests.py --services
  python tests/run_tests.py --api --verbose
  python tests/run_tests.py --all --coverage
        """
    )
    for name in SUITES:
        parser.add_argument(f"--{name}", action="store_true", help=f"Run {SUITES[name][0].lower()}")
    parser.add_argument("--coverage", action="store_true", help="Run tests with coverage reporting (needs pytest-cov)")
    parser.add_argument("--verbose", action="store_true", help="Run with verbose output")

    args = parser.parse_args()

    print("🧪 Storefront Test Runner")
    print("=" * 60)

    selected = [name for name in SUITES if getattr(args, name)] or ["all"]
    if "all" in selected:
        selected = ["all"]

    success_count = sum(
        1 for name in selected if run_suite(name, verbose=args.verbose, coverage=args.coverage)
    )
    total = len(selected)

    print(f"\n{'='*60}")
    print("TEST RUN SUMMARY")
    print(f"{'='*60}")
    print(f"Suites run: {total}")
    print(f"Successful: {success_count}")
    print(f"Failed: {total - success_count}")

    if success_count == total:
        print("\n🎉 All tests passed!")
        sys.exit(0)
    print(f"\n❌ {total - success_count} test suite(s) failed!")
    sys.exit(1)


if __name__ == "__main__":
    main()
