"""
main.py

Main entry point for the Exam Seating Planner.
Reads hall tickets from a spreadsheet, generates the seating plan and
exports it to Excel and PDF.
"""

import argparse
import os
import sys
from typing import List, Optional
from seatplan.models import RoomLayout
from seatplan.classifier import BranchClassifier
from seatplan.data_loader import extract_hall_tickets, load_seating_config, load_branch_map
from seatplan.placement import build_seating_plan, InvalidConfigurationError, SeatingPlanError
from seatplan.validators import validate_plan, check_settings, branch_statistics
from seatplan.excel_exporter import ExcelExporter
from seatplan.pdf_exporter import PdfExporter

# --- Configuration ---
DATA_DIR = "data"
OUTPUT_DIR = "output"
HALL_TICKET_FILE = os.path.join(DATA_DIR, "hall_tickets.xlsx")
SEATING_CONFIG_FILE = os.path.join(DATA_DIR, "seating_config.csv")
BRANCH_CODES_FILE = os.path.join(DATA_DIR, "branch_codes.csv")

EXCEL_FILE_NAME = "Seating_Plan.xlsx"
PDF_FILE_NAME = "Seating_Plan.pdf"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Exam Seating Planner - branch-aware seat allocation")
    p.add_argument('input', nargs='?', default=HALL_TICKET_FILE,
                   help='Excel/CSV file containing hall ticket numbers')
    p.add_argument('--students-per-room', type=int, default=None)
    p.add_argument('--rows', type=int, default=None)
    p.add_argument('--cols', type=int, default=None)
    p.add_argument('--config', default=SEATING_CONFIG_FILE, help='seating_config.csv with parameter,value')
    p.add_argument('--branch-codes', default=BRANCH_CODES_FILE, help='branch_codes.csv with code,branch')
    p.add_argument('--output-dir', default=OUTPUT_DIR)
    p.add_argument('--format', choices=['excel', 'pdf', 'both'], default='both')
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution pipeline.
    """
    args = parse_args(argv)
    print("Starting Exam Seating Planner...")

    # --- 1. Load Settings ---
    config = load_seating_config(args.config)
    students_per_room = config["students_per_room"] if args.students_per_room is None else args.students_per_room
    rows = config["rows"] if args.rows is None else args.rows
    cols = config["cols"] if args.cols is None else args.cols

    problems = check_settings(students_per_room, rows, cols)
    if problems:
        print("\n❌ Invalid settings:")
        for p in problems: print(f"  - {p}")
        return 1

    classifier = BranchClassifier(load_branch_map(args.branch_codes))

    # --- 2. Load Hall Tickets ---
    print(f"\n📂 Loading hall tickets from {args.input}...")
    try:
        hall_tickets = extract_hall_tickets(args.input)
    except ValueError as e:
        print(f"Fatal Error: {e}")
        return 1

    if not hall_tickets:
        print("\n❌ No valid hall ticket numbers found! Expected formats like 259F1A0501")
        return 1

    # --- 3. Generate Plan ---
    try:
        plan = build_seating_plan(hall_tickets, students_per_room, RoomLayout(rows, cols), classifier)
    except (InvalidConfigurationError, SeatingPlanError) as e:
        print(f"Fatal Error: {e}")
        return 1
    print(f"✓ Generated seating plan with {plan.room_count} rooms")

    # --- 4. Validate ---
    validate_plan(plan, hall_tickets)
    for branch, count, percentage in branch_statistics(plan):
        print(f"    {branch}: {count} students ({percentage:.2f}%)")

    # --- 5. Export ---
    print("\n📊 Exporting...")
    os.makedirs(args.output_dir, exist_ok=True)
    if args.format in ('excel', 'both'):
        ExcelExporter(plan).export(os.path.join(args.output_dir, EXCEL_FILE_NAME))
    if args.format in ('pdf', 'both'):
        PdfExporter(plan).export(os.path.join(args.output_dir, PDF_FILE_NAME))

    print("\n--- Seating Plan Generation Complete ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
