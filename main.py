#!/usr/bin/env python3
"""
997 Acknowledgment Processor Command Line Tool

Classifies X12 997 Functional Acknowledgment files and reports whether the batch was accepted.

Usage:
    python main.py acks/                                   # Every file in a directory
    python main.py ack1.edi ack2.edi                       # Specific files
    python main.py acks/ --output result.json              # Also save the batch result as JSON
    python main.py acks/ --log-level DEBUG                 # Show parser diagnostics
"""

import argparse
import logging
import sys
from pathlib import Path

# Try importing from installed package first, fallback to src path
try:
    from ack_service import AckProcessingService
    from cdm import BatchDisposition
    from payload import load_payload_from_paths
    from sinks import DataTagCollector, UserLog
except ImportError:
    # Add src to path for imports when not installed
    sys.path.insert(0, str(Path(__file__).parent / "src"))
    from ack_service import AckProcessingService
    from cdm import BatchDisposition
    from payload import load_payload_from_paths
    from sinks import DataTagCollector, UserLog

EXIT_CODES = {
    BatchDisposition.SUCCESS: 0,
    BatchDisposition.SKIPPED: 0,
    BatchDisposition.ERROR: 2,
}


def process_files(inputs, output_file=None) -> int:
    """Run one batch over the given inputs and print the outcome."""

    try:
        source_files = load_payload_from_paths(inputs)
    except (FileNotFoundError, NotADirectoryError) as e:
        print(f"Error: {e}")
        return 1

    print(f"997 Processor - {len(source_files)} input files")
    print("=" * 50)

    user_log = UserLog()
    tags = DataTagCollector()
    service = AckProcessingService(user_log=user_log, publish_tags=tags)
    result = service.process_batch(source_files)

    for level, messages in user_log.get_messages().items():
        for message in messages:
            print(f"[{level.upper()}] {message}")

    if tags.tags:
        print("\nData Tags:")
        for tag in tags.tags:
            print(f"  {tag.label}: {tag.value}")

    print(f"\nDisposition: {result.disposition.value}")
    for source_file in result.files:
        print(f"  - {source_file.file_name}")

    if output_file:
        with open(output_file, 'w') as f:
            f.write(result.model_dump_json(indent=2))
        print(f"Batch result saved to: {output_file}")

    return EXIT_CODES[result.disposition]


def main(argv=None):
    """Main entry point with command line argument parsing."""

    parser = argparse.ArgumentParser(
        description="Classify X12 997 acknowledgment files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0  all 997s accepted, or no 997s found
  1  input could not be read
  2  at least one 997 was not accepted
        """
    )

    parser.add_argument('inputs', nargs='+',
                       help='997 files or directories of files')
    parser.add_argument('-o', '--output',
                       help='Write the batch result as JSON to this file')
    parser.add_argument('--log-level', default='WARNING',
                       help='Logging level for diagnostics (default: WARNING)')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stderr,
    )

    return process_files(args.inputs, args.output)


if __name__ == "__main__":
    sys.exit(main())
