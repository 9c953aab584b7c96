# dripdesk_ui/handlers.py
# Gradio callbacks. Every grid event rebuilds a DataGrid from the session's
# records and sort state, so nothing derived is kept between renders.

import datetime
import json
import logging
import re

import gradio as gr
import requests

from . import api_client
from . import state
from .grid import DEFAULT_SORT, EmptyGrid, SortState, to_dataframe

logger = logging.getLogger(__name__)

# --- Helpers ---

def get_id_from_selection(selection: str):
    """Extracts the client id from a selector choice like 'Acme <1f2e-...>'."""
    if not selection or selection == state.ALL_CLIENTS:
        return None
    match = re.search(r'<(.*?)>', selection)
    return match.group(1) if match else selection


def render_grid(grid):
    """Returns the (dataframe, empty placeholder) updates for a grid."""
    view = grid.render()
    if isinstance(view, EmptyGrid):
        return gr.update(value=to_dataframe(view), visible=False), gr.update(value=view.message, visible=True)
    return gr.update(value=to_dataframe(view, grid.labels), visible=True), gr.update(visible=False)


def _sort_state(value) -> SortState:
    return value if isinstance(value, SortState) else DEFAULT_SORT


def _hidden_selection():
    """Clears the selected row and hides its action cluster and confirmation row."""
    return None, gr.update(visible=False), gr.update(visible=False)


# --- Portal-level callbacks ---

def check_backend_status():
    return api_client.check_backend()


def load_clients():
    """Refreshes the client selector choices."""
    try:
        clients = api_client.list_records("clients")
    except requests.RequestException as e:
        logger.warning(f"Client selector refresh failed: {e}")
        gr.Warning(f"Failed to load clients: {api_client.error_detail(e)}")
        return gr.update(choices=[state.ALL_CLIENTS], value=state.ALL_CLIENTS)
    state.CLIENT_CHOICES = [f"{c.get('name') or c['id']} <{c['id']}>" for c in clients]
    return gr.update(choices=[state.ALL_CLIENTS] + state.CLIENT_CHOICES, value=state.ALL_CLIENTS)


# --- Resource page callbacks (bound to a page with functools.partial) ---

def refresh_page(page, client_choice, sort_value):
    """
    Loads the page's records and re-renders its grid.
    Outputs: records, dataframe, empty placeholder, status, selected row, action row, confirm row.
    """
    records = page.load(get_id_from_selection(client_choice))
    grid = page.build_grid(records, _sort_state(sort_value))
    dataframe, empty = render_grid(grid)
    msg = f"✅ {page.title} refreshed at {datetime.datetime.now().strftime('%H:%M:%S')} ({len(records)} rows)."
    return (records, dataframe, empty, msg) + _hidden_selection()


def sort_page(page, column_key, records, sort_value):
    """
    Header click: a new column sorts ascending, the active column toggles direction.
    Outputs: sort state, dataframe, empty placeholder, selected row, action row, confirm row.
    """
    grid = page.build_grid(records, _sort_state(sort_value))
    if column_key:
        grid.click_header(column_key)
    dataframe, empty = render_grid(grid)
    return (grid.sort_state, dataframe, empty) + _hidden_selection()


def select_row(page, records, sort_value, row_index, col_index):
    """
    Row click. Opens the record detail unless the click landed on the action column.
    Outputs: selected row, detail view, action row.
    """
    opened = []
    grid = page.build_grid(records, _sort_state(sort_value), on_open=opened.append,
                           on_edit=_noop, on_duplicate=_noop, on_delete=_noop)
    if not grid.data or row_index is None or not 0 <= row_index < len(grid.data):
        return None, gr.update(), gr.update(visible=False)

    key = grid.columns[col_index].key if col_index is not None and 0 <= col_index < len(grid.columns) else None
    grid.click_cell(row_index, key)
    detail = gr.update(value=opened[0], visible=True) if opened else gr.update()
    return row_index, detail, gr.update(visible=True)


def on_select_row(page, records, sort_value, evt: gr.SelectData):
    if evt.index is None:
        return None, gr.update(), gr.update(visible=False)
    row_index, col_index = evt.index[0], evt.index[1]
    return select_row(page, records, sort_value, row_index, col_index)


def _noop(record):
    pass


def start_edit(page, records, sort_value, selected):
    """
    Edit action. Outputs: edit column, record id state, editor, edit status.
    """
    if selected is None:
        gr.Warning("Select a row first.")
        return gr.update(), None, gr.update(), ""
    editing = []
    grid = page.build_grid(records, _sort_state(sort_value), on_edit=editing.append)
    grid.trigger("edit", selected)
    record = editing[0]
    body = json.dumps(page.editable_view(record), indent=2, ensure_ascii=False, default=str)
    return gr.update(visible=True), record.get("id"), gr.update(value=body), f"Editing **{page.display_name(record)}**"


def start_new(page, client_choice):
    """New button. Same outputs as start_edit."""
    body = json.dumps(page.blank_record(get_id_from_selection(client_choice)), indent=2, ensure_ascii=False)
    return gr.update(visible=True), None, gr.update(value=body), f"New {page.singular}"


def save_record(page, record_id, body):
    """Save button. Outputs: edit status, edit column."""
    try:
        payload = json.loads(body or "{}")
    except json.JSONDecodeError as e:
        return f"Invalid JSON: {e}", gr.update(visible=True)
    if not isinstance(payload, dict):
        return "Invalid JSON: the record must be an object.", gr.update(visible=True)

    saved = page.save(record_id, payload)
    if saved is None:
        return f"Failed to save {page.singular}.", gr.update(visible=True)
    return f"Saved {page.display_name(saved)}.", gr.update(visible=False)


def cancel_edit():
    return gr.update(visible=False), None


def duplicate_selected(page, records, sort_value, selected):
    """Duplicate action. The caller refreshes the grid afterwards. Outputs: status."""
    if selected is None:
        gr.Warning("Select a row first.")
        return "Select a row first."
    created = []
    grid = page.build_grid(records, _sort_state(sort_value), on_duplicate=lambda r: created.append(page.duplicate(r)))
    record = grid.trigger("duplicate", selected)
    if created[0] is None:
        return f"Failed to duplicate {page.display_name(record)}."
    return f"Duplicated {page.display_name(record)}."


def ask_confirm_delete(page, records, sort_value, selected):
    """
    Delete action: shows the confirmation row instead of deleting right away.
    Outputs: pending record, confirmation text, action row, confirm row.
    """
    if selected is None:
        gr.Warning("Select a row first.")
        return None, "", gr.update(visible=False), gr.update(visible=False)
    pending = []
    grid = page.build_grid(records, _sort_state(sort_value), on_delete=pending.append)
    grid.trigger("delete", selected)
    record = pending[0]
    return record, f"**{page.delete_prompt(record)}**", gr.update(visible=False), gr.update(visible=True)


def execute_delete(page, pending):
    """Confirmed delete. Outputs: status, action row, confirm row."""
    if not pending:
        return "Nothing to delete.", gr.update(visible=False), gr.update(visible=False)
    if page.delete(pending):
        msg = f"Deleted {page.display_name(pending)}."
    else:
        msg = f"Failed to delete {page.display_name(pending)}."
    return msg, gr.update(visible=False), gr.update(visible=False)


def cancel_delete():
    """Outputs: pending record, action row, confirm row."""
    return None, gr.update(visible=True), gr.update(visible=False)
