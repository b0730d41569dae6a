"""
Flask web interface for the Exam Seating Planner.

Run: python web_app.py
Visit: http://localhost:5000
"""

import io
import os
import secrets
from typing import List, Dict, Optional
from flask import Flask, render_template_string, jsonify, send_file, request, redirect, url_for

from seatplan import utils
from seatplan.models import RoomLayout, SeatingPlan, Room
from seatplan.classifier import BranchClassifier
from seatplan.data_loader import extract_hall_tickets, load_branch_map
from seatplan.placement import build_seating_plan, InvalidConfigurationError, SeatingPlanError
from seatplan.validators import check_settings, branch_statistics, room_summary, count_adjacent_conflicts
from seatplan.excel_exporter import ExcelExporter
from seatplan.pdf_exporter import PdfExporter


app = Flask(__name__)
app.secret_key = secrets.token_hex(16)

BRANCH_CODES_FILE = os.path.join("data", "branch_codes.csv")

# --- Global Cache for the Current Plan ---
g_hall_tickets: List[str] = []
g_seating_plan: Optional[SeatingPlan] = None
g_room_names: List[str] = []
g_classifier: Optional[BranchClassifier] = None
g_settings: Dict[str, int] = {
    "students_per_room": utils.DEFAULT_STUDENTS_PER_ROOM,
    "rows": utils.DEFAULT_ROWS,
    "cols": utils.DEFAULT_COLS,
}
g_error: str = ""


def reset_state():
    """Clears the cached plan and restores default settings."""
    global g_hall_tickets, g_seating_plan, g_room_names, g_classifier, g_error
    g_hall_tickets = []
    g_seating_plan = None
    g_room_names = []
    g_classifier = None
    g_error = ""
    g_settings.update(
        students_per_room=utils.DEFAULT_STUDENTS_PER_ROOM,
        rows=utils.DEFAULT_ROWS,
        cols=utils.DEFAULT_COLS,
    )


def get_classifier() -> BranchClassifier:
    """Branch codes are read from BRANCH_CODES_FILE once, like the CLI does."""
    global g_classifier
    if g_classifier is None:
        g_classifier = BranchClassifier(load_branch_map(BRANCH_CODES_FILE))
    return g_classifier


def carry_room_names(names: List[str], room_count: int) -> List[str]:
    """Keeps existing names, numbering any new rooms and dropping extra names."""
    kept = list(names[:room_count])
    kept.extend(f"Room {i + 1}" for i in range(len(kept), room_count))
    return kept


def run_generation_pipeline(keep_room_names: bool = False) -> bool:
    """
    Rebuilds the plan from the cached hall tickets and current settings.
    Room names are reset unless keep_room_names is set (settings changes).
    """
    global g_seating_plan, g_room_names, g_error

    print("--- GENERATING SEATING PLAN ---")
    print(f"Processing {len(g_hall_tickets)} hall tickets")
    try:
        plan = build_seating_plan(
            g_hall_tickets,
            g_settings["students_per_room"],
            RoomLayout(g_settings["rows"], g_settings["cols"]),
            classifier=get_classifier(),
        )
    except (InvalidConfigurationError, SeatingPlanError) as e:
        print(f"ERROR during generation: {e}")
        g_error = str(e)
        return False

    g_seating_plan = plan
    if keep_room_names:
        g_room_names = carry_room_names(g_room_names, plan.room_count)
    else:
        g_room_names = utils.default_room_names(plan.room_count)
    g_error = ""
    print(f"Generated seating plan with {plan.room_count} rooms")
    return True


def _parse_settings(form) -> Dict:
    values = {}
    for key in ("students_per_room", "rows", "cols"):
        raw = form.get(key, g_settings[key])
        try:
            values[key] = int(raw)
        except (TypeError, ValueError):
            values[key] = raw
    return values


# --- HTML Generation ---

def _build_room_html(room: Room) -> str:
    """
    Generates the HTML seat grid for one room, coloured by branch.
    """
    html = '<table class="room-grid"><tbody>'
    for r in range(room.rows):
        html += '<tr>'
        for c in range(room.cols):
            candidate = room.get_seat(r, c)
            if candidate is None:
                html += '<td class="seat-empty">Empty</td>'
                continue
            color = utils.get_branch_color(candidate.branch)
            html += (
                f'<td style="background-color: #{color};">'
                f'<div class="s-ticket">{candidate.identifier}</div>'
                f'<div class="s-branch">{candidate.branch}</div></td>'
            )
        html += '</tr>'
    html += '</tbody></table>'
    return html


def _build_room_list_html(plan: SeatingPlan, room_index: int) -> str:
    """Seat list for one room in placement order."""
    html = '<table class="room-list"><thead><tr><th>S.No</th><th>Hall Ticket</th><th>Seating</th><th>Branch</th></tr></thead><tbody>'
    for i, seat in enumerate(plan.room_assignments(room_index), 1):
        color = utils.get_branch_color(seat.candidate.branch)
        html += (
            f'<tr><td>{i}</td><td>{seat.candidate.identifier}</td><td>{seat.seat_label}</td>'
            f'<td style="background-color: #{color};">{seat.candidate.branch}</td></tr>'
        )
    html += '</tbody></table>'
    return html


HOME_PAGE = """
<!DOCTYPE html>
<html><head><title>Exam Seating Planner</title>
<style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; background: #f4f7f6; padding: 20px; }
    .container { max-width: 95%; margin: 20px auto; }
    .card { background: white; padding: 30px; border-radius: 15px; box-shadow: 0 5px 15px rgba(0,0,0,0.05); margin-bottom: 20px; }
    h1 { color: #667eea; margin-bottom: 10px; }
    h2 { color: #333; margin-bottom: 10px; }
    .btn { padding: 10px 20px; border: none; border-radius: 8px; cursor: pointer; font-weight: bold;
           text-decoration: none; display: inline-block; margin: 5px; }
    .btn-primary { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; }
    .btn-secondary { background: #f0f0f0; color: #333; }
    .error { background: #fdecea; color: #b00020; padding: 12px; border-radius: 8px; margin-bottom: 20px; }
    label { margin-right: 15px; }
    input[type=number] { width: 70px; }
    .legend span { display: inline-block; padding: 4px 10px; border-radius: 6px; margin: 3px; }
    table.room-grid { border-collapse: collapse; margin-top: 10px; }
    table.room-grid td { border: 1px solid #e0e0e0; padding: 8px; text-align: center; min-width: 110px; height: 55px; }
    table.room-grid td.seat-empty { background: #fdfdfd; color: #bbb; }
    .s-ticket { font-weight: bold; }
    .s-branch { font-size: 0.8em; color: #555; }
    table.room-list { border-collapse: collapse; margin-top: 10px; }
    table.room-list th, table.room-list td { border: 1px solid #e0e0e0; padding: 6px 12px; text-align: left; }
</style></head>
<body><div class="container">
    <div class="card">
        <h1>🪑 Exam Seating Planner</h1>
        <p>Upload an Excel or CSV file with hall ticket numbers (e.g. 259F1A0501).</p>
    </div>
    {% if error %}<div class="error">{{ error }}</div>{% endif %}
    <div class="card">
        <form action="/upload" method="post" enctype="multipart/form-data">
            <input type="file" name="file" accept=".xlsx,.xls,.csv">
            <button class="btn btn-primary" type="submit">Upload &amp; Generate</button>
        </form>
        <form action="/settings" method="post" style="margin-top: 15px;">
            <label>Students per room <input type="number" name="students_per_room" min="1" max="{{ max_students }}" value="{{ settings.students_per_room }}"></label>
            <label>Rows <input type="number" name="rows" min="1" max="{{ max_dim }}" value="{{ settings.rows }}"></label>
            <label>Columns <input type="number" name="cols" min="1" max="{{ max_dim }}" value="{{ settings.cols }}"></label>
            <button class="btn btn-secondary" type="submit">Apply Settings</button>
        </form>
    </div>
    {% if plan %}
    <div class="card">
        <h2>{{ seated }} students in {{ rooms|length }} rooms</h2>
        <p>Adjacent same-branch pairs: {{ conflicts }}</p>
        <div class="legend">
            {% for branch, count, pct in stats %}<span style="background: #{{ colors[branch] }};">{{ branch }}: {{ count }}</span>{% endfor %}
        </div>
        <a class="btn btn-primary" href="/download/excel">⬇ Excel</a>
        <a class="btn btn-primary" href="/download/pdf">⬇ PDF</a>
        {% if view == 'list' %}<a class="btn btn-secondary" href="/?view=grid">Grid View</a>
        {% else %}<a class="btn btn-secondary" href="/?view=list">List View</a>{% endif %}
    </div>
    {% for room in rooms %}
    <div class="card">
        <form action="/rename-room" method="post">
            <input type="hidden" name="index" value="{{ room.index }}">
            <input type="text" name="name" value="{{ room.name }}">
            <button class="btn btn-secondary" type="submit">Rename</button>
            <span>{{ room.count }} / {{ capacity }} seats</span>
        </form>
        {{ room.html|safe }}
    </div>
    {% endfor %}
    {% endif %}
</div></body></html>
"""

# --- Flask Routes ---

@app.route('/')
def index():
    view = request.args.get('view', 'grid')
    rooms = []
    stats = []
    conflicts = 0
    if g_seating_plan is not None:
        for room, (name, count, _) in zip(g_seating_plan.rooms, room_summary(g_seating_plan, g_room_names)):
            if view == 'list':
                html = _build_room_list_html(g_seating_plan, room.index)
            else:
                html = _build_room_html(room)
            rooms.append({"index": room.index, "name": name, "count": count, "html": html})
        stats = branch_statistics(g_seating_plan)
        conflicts = count_adjacent_conflicts(g_seating_plan)
    return render_template_string(
        HOME_PAGE,
        error=g_error,
        settings=g_settings,
        max_students=utils.MAX_STUDENTS_PER_ROOM,
        max_dim=utils.MAX_ROOM_DIMENSION,
        plan=g_seating_plan,
        view=view,
        capacity=g_seating_plan.layout.capacity if g_seating_plan else 0,
        seated=g_seating_plan.seated_count if g_seating_plan else 0,
        rooms=rooms,
        stats=stats,
        colors={branch: utils.get_branch_color(branch) for branch, _, _ in stats},
        conflicts=conflicts,
    )


@app.route('/upload', methods=['POST'])
def upload():
    global g_hall_tickets, g_error
    file = request.files.get('file')
    if file is None or not file.filename:
        g_error = "No file selected. Please select an Excel file to upload."
        return redirect(url_for('index'))

    print(f"Processing file: {file.filename}")
    try:
        tickets = extract_hall_tickets(io.BytesIO(file.read()), filename=file.filename)
    except ValueError as e:
        g_error = f"Error processing the file: {e}. Please make sure it is a valid Excel file."
        return redirect(url_for('index'))

    if not tickets:
        g_error = 'No valid hall ticket numbers found in the file. Please ensure the file contains hall tickets in formats like "259F1A0501".'
        return redirect(url_for('index'))

    g_hall_tickets = tickets
    run_generation_pipeline()
    return redirect(url_for('index'))


@app.route('/settings', methods=['POST'])
def update_settings():
    global g_error
    values = _parse_settings(request.form)
    problems = check_settings(values["students_per_room"], values["rows"], values["cols"])
    if problems:
        g_error = " ".join(problems)
        return redirect(url_for('index'))

    g_settings.update(values)
    g_error = ""
    if g_hall_tickets:
        run_generation_pipeline(keep_room_names=True)
    return redirect(url_for('index'))


@app.route('/rename-room', methods=['POST'])
def rename_room():
    try:
        index = int(request.form.get('index', ''))
    except ValueError:
        return "Invalid room index", 400
    name = request.form.get('name', '').strip()
    if not 0 <= index < len(g_room_names):
        return "Invalid room index", 400
    g_room_names[index] = name or f"Room {index + 1}"
    return redirect(url_for('index'))


@app.route('/download/excel')
def download_excel():
    if g_seating_plan is None:
        return "No seating plan has been generated. Please upload a file first.", 400
    data = ExcelExporter(g_seating_plan, g_room_names).to_bytes()
    return send_file(
        io.BytesIO(data),
        as_attachment=True,
        download_name="Seating_Plan.xlsx",
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


@app.route('/download/pdf')
def download_pdf():
    if g_seating_plan is None:
        return "No seating plan has been generated. Please upload a file first.", 400
    data = PdfExporter(g_seating_plan, g_room_names).to_bytes()
    return send_file(
        io.BytesIO(data),
        as_attachment=True,
        download_name="Seating_Plan.pdf",
        mimetype="application/pdf"
    )

# --- API ENDPOINTS ---

@app.route('/api/plan')
def api_plan():
    if g_seating_plan is None:
        return jsonify({'generated': False, 'error': g_error or None})
    payload = g_seating_plan.to_dict()
    payload['generated'] = True
    payload['room_names'] = list(g_room_names)
    payload['branch_statistics'] = [
        {'branch': b, 'count': c, 'percentage': p} for b, c, p in branch_statistics(g_seating_plan)
    ]
    return jsonify(payload)


@app.route('/api/lookup')
def api_lookup():
    ticket = request.args.get('ticket', '').strip().upper()
    if g_seating_plan is None:
        return jsonify({'error': 'No seating plan generated'}), 400
    seat = g_seating_plan.locate(ticket)
    if seat is None:
        return jsonify({'error': f'Hall ticket {ticket} not found'}), 404
    return jsonify({
        'identifier': seat.candidate.identifier,
        'branch': seat.candidate.branch,
        'room': g_room_names[seat.room],
        'row': seat.row + 1,
        'column': seat.col + 1,
    })


if __name__ == '__main__':
    app.run(debug=True, port=5000)
