import os
import sys
import subprocess
import argparse
from dotenv import load_dotenv
from tests.util.firebase_emulator import start_emulators, stop_emulators

if __name__ == "__main__":
    load_dotenv(".env.dev", override=True)
    parser = argparse.ArgumentParser(description="Run Firebase Functions tests with emulator")
    parser.add_argument("--test-type",
                        choices=["unit", "integration", "all"],
                        default="all",
                        help="Type of tests to run")
    parser.add_argument("--show-logs",
                        action="store_true",
                        help="Show emulator logs")
    parser.add_argument("--no-emulator",
                        action="store_true",
                        help="Run tests without starting emulators (assumes they're already running)")

    args = parser.parse_args()

    tests_cmd = [
        sys.executable,
        "-m",
        "pytest",
    ]

    # Unit tests run against the in-memory store and need no emulator
    unit_test_cmd = [
        *tests_cmd,
        "tests/unit",
        "-v",
        "-m",
        "unit",
    ]

    integration_test_cmd = [
        *tests_cmd,
        "tests/integration",
        "-v",
        "-m",
        "integration",
    ]

    results = []

    if args.test_type in ["unit", "all"]:
        print("\n======= Running Unit Tests =======\n")
        unit_result = subprocess.run(unit_test_cmd)
        results.append(("Unit Tests", unit_result.returncode))

    if args.test_type in ["integration", "all"]:
        emulator_proc = None

        if not args.no_emulator:
            print("\n======= Starting Firestore, Auth and Storage Emulators =======\n")
            emulator_proc = start_emulators(show_logs=args.show_logs)

            assert (
                "FIRESTORE_EMULATOR_HOST" in os.environ
            ), "FIRESTORE_EMULATOR_HOST should be set"
        else:
            print("\n======= Using existing emulators (--no-emulator specified) =======\n")

        try:
            print("\n======= Running Integration Tests =======\n")
            integration_result = subprocess.run(integration_test_cmd)
            results.append(("Integration Tests", integration_result.returncode))

        finally:
            if emulator_proc:
                print("\n======= Stopping Emulators =======\n")
                stop_emulators(emulator_proc)

    # Display results
    print("\n======= Test Results =======")
    for name, code in results:
        print(f"{name}: {'PASSED' if code == 0 else 'FAILED'}")

    # Exit with failure if any test set failed
    if any(code != 0 for _, code in results):
        print(f"\n======= {len([c for _, c in results if c != 0])} out of {len(results)} test suites FAILED =======")
        sys.exit(1)
    else:
        print(f"\n======= All {len(results)} Test Suites Passed =======")
        sys.exit(0)
