"""
seatplan/excel_exporter.py

Writes a seating plan to an Excel workbook: a summary, two sheets per room
(seat list and hall-wise grid) and branch statistics.
"""
import io
from datetime import datetime
from typing import List, Optional
import openpyxl
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet
from openpyxl.styles import Font, Border, Side, Alignment, PatternFill
from openpyxl.utils import get_column_letter
from .models import SeatingPlan, Room
from .validators import branch_statistics, room_summary, resolve_room_names
from . import utils

# --- Styling Constants ---
HEADER_FILL = PatternFill(start_color="4F81BD", end_color="4F81BD", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True, size=11)
TITLE_FONT = Font(bold=True, size=14)
CENTER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
THIN_BORDER_SIDE = Side(style="thin", color="BFBFBF")
THIN_BORDER = Border(left=THIN_BORDER_SIDE, right=THIN_BORDER_SIDE, top=THIN_BORDER_SIDE, bottom=THIN_BORDER_SIDE)
EMPTY_FILL = PatternFill(start_color="F5F5F5", end_color="F5F5F5", fill_type="solid")
EMPTY_FONT = Font(color="A0A0A0", size=9)


class ExcelExporter:
    def __init__(self, plan: SeatingPlan, room_names: Optional[List[str]] = None):
        self.plan = plan
        self.room_names = resolve_room_names(plan, room_names)

    def _write_header_row(self, ws: Worksheet, row: int, headers: List[str]):
        for col_idx, header in enumerate(headers, 1):
            cell = ws.cell(row, col_idx, header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = CENTER_ALIGN
            cell.border = THIN_BORDER

    def _write_summary(self, wb: Workbook):
        ws = wb.create_sheet(title="Summary")
        ws.cell(1, 1, "Examination Seating Plan Summary").font = TITLE_FONT
        ws.cell(2, 1, "Generated on")
        ws.cell(2, 2, datetime.now().strftime("%d/%m/%Y %H:%M"))
        ws.cell(3, 1, "Layout")
        ws.cell(3, 2, f"{self.plan.layout.rows} rows x {self.plan.layout.cols} columns")

        self._write_header_row(ws, 5, ["Room", "Total Students", "Branches"])
        row = 6
        for name, count, branches in room_summary(self.plan, self.room_names):
            ws.cell(row, 1, name)
            ws.cell(row, 2, count)
            ws.cell(row, 3, ", ".join(branches))
            for col in range(1, 4):
                ws.cell(row, col).border = THIN_BORDER
            row += 1

        ws.column_dimensions['A'].width = 20
        ws.column_dimensions['B'].width = 16
        ws.column_dimensions['C'].width = 40

    def _write_room_seating(self, wb: Workbook, room: Room):
        """Seat list for one room: hall ticket, desk/column, branch."""
        ws = wb.create_sheet(title=f"Room{room.index + 1}_Seating")
        ws.cell(1, 1, f"Room: {self.room_names[room.index]} - Seating Plan").font = TITLE_FONT

        self._write_header_row(ws, 3, ["S.No", "Hall Ticket", "Seating", "Branch"])
        row = 4
        for number, seat in enumerate(self.plan.room_assignments(room.index), 1):
            values = [number, seat.candidate.identifier, seat.seat_label, seat.candidate.branch]
            for col_idx, value in enumerate(values, 1):
                cell = ws.cell(row, col_idx, value)
                cell.border = THIN_BORDER
                cell.alignment = CENTER_ALIGN
            row += 1

        ws.column_dimensions['A'].width = 8
        ws.column_dimensions['B'].width = 18
        ws.column_dimensions['C'].width = 24
        ws.column_dimensions['D'].width = 14

    def _write_room_grid(self, wb: Workbook, room: Room):
        """Hall-wise grid, one cell per seat, coloured by branch."""
        ws = wb.create_sheet(title=f"Room{room.index + 1}_HallWise")
        ws.cell(1, 1, f"HALL WISE SEATING PLAN - {self.room_names[room.index]}").font = TITLE_FONT
        ws.cell(2, 1, "Name of the Invigilator: ______________________")

        header_row = 4
        ws.cell(header_row, 1, "")
        for c in range(room.cols):
            ws.cell(header_row, c + 2, f"COLUMN {c + 1}")
        self._style_header_cells(ws, header_row, room.cols + 1)

        for r in range(room.rows):
            excel_row = header_row + 1 + r
            desk = ws.cell(excel_row, 1, f"DESK {r + 1}")
            desk.font = HEADER_FONT
            desk.fill = HEADER_FILL
            desk.alignment = CENTER_ALIGN
            for c in range(room.cols):
                candidate = room.get_seat(r, c)
                cell = ws.cell(excel_row, c + 2)
                cell.border = THIN_BORDER
                cell.alignment = CENTER_ALIGN
                if candidate is None:
                    cell.value = "EMPTY"
                    cell.fill = EMPTY_FILL
                    cell.font = EMPTY_FONT
                    continue
                cell.value = f"{candidate.identifier}\n{candidate.branch}"
                color = utils.get_branch_color(candidate.branch)
                cell.fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
            ws.row_dimensions[excel_row].height = 32

        ws.column_dimensions['A'].width = 10
        for c in range(room.cols):
            ws.column_dimensions[get_column_letter(c + 2)].width = 16

    def _style_header_cells(self, ws: Worksheet, row: int, count: int):
        for col in range(1, count + 1):
            cell = ws.cell(row, col)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = CENTER_ALIGN
            cell.border = THIN_BORDER

    def _write_branch_statistics(self, wb: Workbook):
        ws = wb.create_sheet(title="Branch Statistics")
        self._write_header_row(ws, 1, ["Branch", "Count", "Percentage"])
        row = 2
        stats = branch_statistics(self.plan)
        for branch, count, percentage in stats:
            ws.cell(row, 1, branch)
            ws.cell(row, 2, count)
            ws.cell(row, 3, f"{percentage:.2f}%")
            row += 1
        total = ws.cell(row, 1, "Total")
        total.font = Font(bold=True)
        ws.cell(row, 2, sum(count for _, count, _ in stats)).font = Font(bold=True)
        ws.cell(row, 3, "100.00%" if stats else "0.00%").font = Font(bold=True)

        ws.column_dimensions['A'].width = 18
        ws.column_dimensions['B'].width = 10
        ws.column_dimensions['C'].width = 14

    def build_workbook(self) -> Workbook:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)

        self._write_summary(wb)
        for room in self.plan.rooms:
            self._write_room_seating(wb, room)
            self._write_room_grid(wb, room)
        self._write_branch_statistics(wb)
        return wb

    def export(self, filename: str):
        """Saves the workbook to disk."""
        wb = self.build_workbook()
        wb.save(filename)
        print(f"  ✓ Exported: {filename}")

    def to_bytes(self) -> bytes:
        """Workbook as bytes, for downloads."""
        buffer = io.BytesIO()
        self.build_workbook().save(buffer)
        return buffer.getvalue()
