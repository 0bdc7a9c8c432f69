#!/usr/bin/env python3
"""Export every stored annotation document to a file"""

import sys
import json
from pathlib import Path
from datetime import datetime

# Add the project root to sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
from storage.annotation_store import AnnotationStore
from storage.export import documents_to_csv

# Load .env
load_dotenv()


def export_annotations(output_format: str = "csv", output: str = None) -> Path:
    """Write documents as CSV (same columns as /list?format=csv) or JSON"""
    with AnnotationStore() as store:
        documents = store.list_documents()

    if output:
        output_file = Path(output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_file = project_root / f"annotations_export_{timestamp}.{output_format}"

    if output_format == "csv":
        output_file.write_text(documents_to_csv(documents), encoding='utf-8')
    else:
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump([doc.to_dict() for doc in documents], f, ensure_ascii=False, indent=2)

    print(f"Exported {len(documents)} document(s) to {output_file}")
    return output_file


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Export stored annotations')
    parser.add_argument('--format', choices=['csv', 'json'], default='csv', dest='output_format')
    parser.add_argument('--output', help='output file (default: timestamped file in the project root)')
    args = parser.parse_args()

    try:
        export_annotations(args.output_format, args.output)
    except Exception as e:
        print(f"Export failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
