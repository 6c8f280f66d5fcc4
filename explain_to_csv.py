'''
Convert a folder of EXPLAIN json files (PostgreSQL FORMAT JSON, MySQL / MariaDB FORMAT=JSON)
to a single csv file with [id, file, dialect, json] of normalized plan trees
'''

import argparse
import csv
import json
import logging
import os

from tqdm import tqdm

from dbviz_parsers.query_plan import load_plan
from dbviz_parsers.terminology import Terminology
from dbviz_parsers.utils_plan import PlanDialect


def explain_json_to_plan(infilepath):
    with open(infilepath, 'r', encoding='utf-8') as infile:
        document = json.load(infile)
    return load_plan(document)


def process_files(input_folder, output_csv_path, terminology=None):
    output_dir = os.path.dirname(output_csv_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    id_counter = 1
    files_with_errors = {}
    unrecognized_files = []
    filenames = sorted(f for f in os.listdir(input_folder) if f.endswith(".json"))

    with open(output_csv_path, 'w', newline='', encoding='utf-8') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['id', 'file', 'dialect', 'json'])  # Write header

        for filename in tqdm(filenames):
            try:
                plan = explain_json_to_plan(os.path.join(input_folder, filename))
            except (OSError, ValueError, TypeError) as e:
                files_with_errors[filename] = str(e)
                logging.error("Error processing %s: %s", filename, e)
                continue

            if plan.dialect is PlanDialect.Unrecognized:
                unrecognized_files.append(filename)
            writer.writerow([id_counter, filename, plan.dialect.value, json.dumps(plan.to_json(terminology))])
            id_counter += 1

    print("\n\nSummary Report:")
    print(f"\nConverted {id_counter - 1} of {len(filenames)} plan files.")
    if unrecognized_files:
        print(f"\nUnrecognized dialect (zero metrics): {unrecognized_files}")
    if files_with_errors:
        print("\nFiles with Errors:")
        for filename, error in files_with_errors.items():
            print(f"  {filename}: {error}")
    else:
        print("\nNo files had processing errors.")
    return id_counter - 1


def main(argv=None):
    parser = argparse.ArgumentParser(description="Convert EXPLAIN json plans to CSV with normalized plan trees")
    parser.add_argument('--input_folder', type=str, required=True, help='Directory with .json explain output files')
    parser.add_argument('--output_csv_path', type=str, required=True, help='Path to output CSV file')
    parser.add_argument('--terminology', type=str, default=None, choices=[t.value for t in Terminology],
                        help='Relabel node types in this terminology')
    parser.add_argument('--log_level', type=str, default='WARNING', help='Logging level (DEBUG, INFO, WARNING, ...)')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    process_files(
        input_folder=args.input_folder,
        output_csv_path=args.output_csv_path,
        terminology=args.terminology,
    )


if __name__ == '__main__':
    main()
