'''
Convert a folder of sysbench run logs to a single csv file with [file, time, tps, qps, lat]
'''

import argparse
import csv
import logging
import os

from tqdm import tqdm

from dbviz_parsers.sysbench_log import DEFAULT_PERCENTILE, parse_benchmark_log


def process_files(input_folder, output_csv_path, percentile=DEFAULT_PERCENTILE, suffixes=(".log", ".txt")):
    output_dir = os.path.dirname(output_csv_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    runs = []
    files_with_errors = {}
    filenames = sorted(f for f in os.listdir(input_folder) if f.endswith(tuple(suffixes)))

    with open(output_csv_path, 'w', newline='', encoding='utf-8') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['file', 'time', 'tps', 'qps', 'lat'])  # Write header

        for filename in tqdm(filenames):
            try:
                with open(os.path.join(input_folder, filename), 'r', encoding='utf-8', errors='replace') as infile:
                    run = parse_benchmark_log(infile.read(), name=filename, percentile=percentile)
            except OSError as e:
                files_with_errors[filename] = str(e)
                logging.error("Error reading %s: %s", filename, e)
                continue

            for sample in run.samples:
                writer.writerow([filename, sample.time, sample.tps, sample.qps, sample.lat])
            runs.append(run)

    print("\n\nSummary Report:")
    for run in runs:
        avg = f"{run.avg_tps:.2f}" if run.has_avg_tps else "n/a"
        print(f"  {run.name}: {len(run.samples)} intervals, avg tps {avg}")

    missing_avg = [run.name for run in runs if not run.has_avg_tps]
    if missing_avg:
        print(f"\nFiles without average TPS: {missing_avg}")
    if files_with_errors:
        print("\nFiles with Errors:")
        for filename, error in files_with_errors.items():
            print(f"  {filename}: {error}")
    else:
        print("\nNo files had processing errors.")
    return runs


def main(argv=None):
    parser = argparse.ArgumentParser(description="Convert sysbench run logs to CSV interval samples")
    parser.add_argument('--input_folder', type=str, required=True, help='Directory with sysbench log files')
    parser.add_argument('--output_csv_path', type=str, required=True, help='Path to output CSV file')
    parser.add_argument('--percentile', type=int, default=DEFAULT_PERCENTILE, help='Latency percentile printed by sysbench (--percentile)')
    parser.add_argument('--log_level', type=str, default='WARNING', help='Logging level (DEBUG, INFO, WARNING, ...)')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    process_files(
        input_folder=args.input_folder,
        output_csv_path=args.output_csv_path,
        percentile=args.percentile,
    )


if __name__ == '__main__':
    main()
