"""
seatplan/pdf_exporter.py

Printable version of a seating plan: room summary, branch statistics and,
for each room, a seat list followed by a hall-wise grid page.
"""
import io
from datetime import datetime
from typing import List, Optional, Sequence, Union, IO
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from .models import SeatingPlan, Room
from .validators import branch_statistics, room_summary, resolve_room_names
from . import utils

PAGE_WIDTH, PAGE_HEIGHT = A4
LEFT_MARGIN = 40
TOP_Y = PAGE_HEIGHT - 50
BOTTOM_Y = 60
ROW_HEIGHT = 15


class PdfExporter:
    def __init__(self, plan: SeatingPlan, room_names: Optional[List[str]] = None):
        self.plan = plan
        self.room_names = resolve_room_names(plan, room_names)

    def _header(self, c: canvas.Canvas, title: str) -> float:
        c.setFont("Helvetica-Bold", 14)
        c.drawString(LEFT_MARGIN, TOP_Y, title)
        c.setFont("Helvetica", 10)
        return TOP_Y - 30

    def _table(self, c: canvas.Canvas, title: str, headers: Sequence[str],
               rows: Sequence[Sequence], widths: Sequence[int], y: float) -> float:
        """Draws a plain table, repeating the header after each page break."""

        def draw_headers(y_pos: float) -> float:
            c.setFont("Helvetica-Bold", 10)
            x = LEFT_MARGIN
            for header, width in zip(headers, widths):
                c.drawString(x, y_pos, header)
                x += width
            y_pos -= 5
            c.line(LEFT_MARGIN, y_pos, LEFT_MARGIN + sum(widths), y_pos)
            c.setFont("Helvetica", 10)
            return y_pos - ROW_HEIGHT

        y = draw_headers(y)
        for row in rows:
            if y < BOTTOM_Y:
                c.showPage()
                y = draw_headers(self._header(c, f"{title} (cont.)"))
            x = LEFT_MARGIN
            for value, width in zip(row, widths):
                c.drawString(x, y, str(value))
                x += width
            y -= ROW_HEIGHT
        return y - 10

    def _summary_page(self, c: canvas.Canvas):
        y = self._header(c, "Examination Seating Plan")
        c.drawString(LEFT_MARGIN, y, f"Generated on: {datetime.now().strftime('%d/%m/%Y %H:%M')}")
        y -= 25
        rows = [
            (name, count, ", ".join(branches)[:70])
            for name, count, branches in room_summary(self.plan, self.room_names)
        ]
        self._table(c, "Summary of Rooms", ["Room", "Students", "Branches"], rows, [110, 70, 330], y)
        c.showPage()

    def _statistics_page(self, c: canvas.Canvas):
        y = self._header(c, "Branch Statistics")
        stats = branch_statistics(self.plan)
        rows = [(branch, count, f"{pct:.2f}%") for branch, count, pct in stats]
        rows.append(("Total", sum(count for _, count, _ in stats), "100.00%" if stats else "0.00%"))
        self._table(c, "Branch Statistics", ["Branch", "Count", "Percentage"], rows, [150, 80, 80], y)
        c.showPage()

    def room_header_lines(self, room: Room) -> List[str]:
        layout = self.plan.layout
        return [
            f"Total Students: {room.student_count}",
            f"Room Configuration: {layout.rows} rows x {layout.cols} columns ({layout.capacity} seats)",
            f"Branches: {', '.join(room.branches())}",
        ]

    def attendance_lines(self, room: Room) -> List[str]:
        return [
            f"Allotted: {room.student_count}",
            "Absent: ________",
            "Present: ________",
        ]

    def _room_pages(self, c: canvas.Canvas, room: Room):
        name = self.room_names[room.index]
        title = f"Room: {name} - Seating Plan"
        y = self._header(c, title)
        for line in self.room_header_lines(room):
            c.drawString(LEFT_MARGIN, y, line)
            y -= ROW_HEIGHT
        y -= 10
        rows = [
            (seat.candidate.identifier, seat.seat_label, seat.candidate.branch)
            for seat in self.plan.room_assignments(room.index)
        ]
        self._table(c, title, ["Hall Ticket", "Seating", "Branch"], rows, [140, 200, 120], y)
        c.showPage()

        y = self._header(c, f"HALL WISE SEATING PLAN - {name}")
        c.drawString(LEFT_MARGIN, y, f"Name of the Invigilator: _______________   Hall Name: {name}")
        y -= 30
        y = self._draw_grid(c, room, y) - 30
        if y < BOTTOM_Y + 4 * ROW_HEIGHT:
            c.showPage()
            y = self._header(c, f"HALL WISE SEATING PLAN - {name} (cont.)")
        self._signature_block(c, room, y)
        c.showPage()

    def _signature_block(self, c: canvas.Canvas, room: Room, y: float):
        c.setFont("Helvetica-Bold", 10)
        c.drawString(LEFT_MARGIN, y, "Attendance Summary")
        c.setFont("Helvetica", 10)
        y -= ROW_HEIGHT
        for line in self.attendance_lines(room):
            c.drawString(LEFT_MARGIN, y, line)
            y -= ROW_HEIGHT
        y -= 25
        c.drawString(LEFT_MARGIN, y, "Signature of the Invigilator")
        c.drawRightString(PAGE_WIDTH - LEFT_MARGIN, y, "Signature of the Principal")

    def _draw_grid(self, c: canvas.Canvas, room: Room, top: float) -> float:
        usable_width = PAGE_WIDTH - 2 * LEFT_MARGIN
        cell_width = min(90, usable_width / max(room.cols, 1))
        cell_height = 36
        c.setFont("Helvetica", 8)
        for r in range(room.rows):
            for col in range(room.cols):
                x = LEFT_MARGIN + col * cell_width
                y = top - (r + 1) * cell_height
                candidate = room.get_seat(r, col)
                fill = colors.HexColor("#" + (utils.get_branch_color(candidate.branch) if candidate else "FFFFFF"))
                c.setFillColor(fill)
                c.rect(x, y, cell_width, cell_height, stroke=1, fill=1)
                c.setFillColor(colors.black)
                if candidate is None:
                    c.drawCentredString(x + cell_width / 2, y + cell_height / 2 - 3, "EMPTY")
                else:
                    c.drawCentredString(x + cell_width / 2, y + cell_height / 2 + 2, candidate.identifier)
                    c.drawCentredString(x + cell_width / 2, y + cell_height / 2 - 9, candidate.branch)
        c.setFont("Helvetica", 10)
        return top - room.rows * cell_height

    def _render(self, target: Union[str, IO[bytes]]):
        c = canvas.Canvas(target, pagesize=A4)
        self._summary_page(c)
        self._statistics_page(c)
        for room in self.plan.rooms:
            self._room_pages(c, room)
        c.save()

    def export(self, filename: str):
        self._render(filename)
        print(f"  ✓ Exported: {filename}")

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self._render(buffer)
        return buffer.getvalue()
