# dripdesk_ui/ui.py
# Layout builders. Each function creates components and returns them in a dict for wiring in main.py.

import gradio as gr

from . import state
from .grid import DEFAULT_SORT


def create_client_selector():
    """The shared tenant filter shown above the tabs."""
    return gr.Dropdown(
        label="Client",
        info="Limits every list to one client's records",
        choices=[state.ALL_CLIENTS],
        value=state.ALL_CLIENTS,
        interactive=True
    )


def create_resource_tab(page):
    """Builds the list/detail/edit tab for one resource page."""
    columns = page.columns()
    sortable = [(c.header, c.key) for c in columns if c.sortable]

    with gr.TabItem(page.title, id=f"{page.collection}_tab") as tab:
        gr.Markdown(f"## {page.title}")
        with gr.Row():
            refresh_btn = gr.Button("🔄 Refresh", variant="secondary")
            new_btn = gr.Button(f"➕ New {page.singular}", variant="primary")
        status_output = gr.Markdown()

        with gr.Row():
            sort_dd = gr.Dropdown(label="Sort by", choices=sortable, value=None, interactive=True, scale=3)
            sort_btn = gr.Button("⇅ Sort", scale=1)

        empty_output = gr.Markdown(visible=False)
        dataframe = gr.DataFrame(
            headers=[c.header for c in columns],
            datatype="markdown",
            interactive=False,
            wrap=True,
        )

        records_state = gr.State([])
        sort_state = gr.State(DEFAULT_SORT)
        selected_state = gr.State(None)
        pending_delete_state = gr.State(None)

        with gr.Row(visible=False) as action_row:
            edit_btn = gr.Button("✏️ Edit")
            duplicate_btn = gr.Button("📄 Duplicate")
            delete_btn = gr.Button("🗑️ Delete", variant="stop")

        with gr.Group(visible=False) as confirm_row:
            confirm_text = gr.Markdown()
            with gr.Row():
                confirm_yes_btn = gr.Button("Yes, delete", variant="stop")
                confirm_no_btn = gr.Button("Cancel")

        detail_view = gr.JSON(label="Details", visible=False)

        with gr.Column(visible=False) as edit_column:
            edit_title = gr.Markdown()
            edit_id_state = gr.State(None)
            editor = gr.Code(label="Record (JSON)", language="json", interactive=True)
            with gr.Row():
                save_btn = gr.Button("💾 Save", variant="primary")
                cancel_edit_btn = gr.Button("Cancel")
        edit_status = gr.Markdown()

    return {
        "tab": tab, "refresh_btn": refresh_btn, "new_btn": new_btn, "status_output": status_output,
        "sort_dd": sort_dd, "sort_btn": sort_btn, "empty_output": empty_output, "dataframe": dataframe,
        "records_state": records_state, "sort_state": sort_state, "selected_state": selected_state,
        "pending_delete_state": pending_delete_state, "action_row": action_row, "edit_btn": edit_btn,
        "duplicate_btn": duplicate_btn, "delete_btn": delete_btn, "confirm_row": confirm_row,
        "confirm_text": confirm_text, "confirm_yes_btn": confirm_yes_btn, "confirm_no_btn": confirm_no_btn,
        "detail_view": detail_view, "edit_column": edit_column, "edit_title": edit_title,
        "edit_id_state": edit_id_state, "editor": editor, "save_btn": save_btn,
        "cancel_edit_btn": cancel_edit_btn, "edit_status": edit_status,
    }
