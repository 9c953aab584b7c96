# dripdesk_ui/main.py
# Assembles the portal: one tab per resource page, wired to the handlers.

import locale
import logging
import os
from functools import partial

import gradio as gr

from .config import config
from .notifications import GradioNotifier
from .pages import PAGES
from . import handlers
from . import ui

logger = logging.getLogger(__name__)


def wire_resource_tab(page, tab_ui, client_dd):
    """Connects one resource tab's components to the handlers, bound to `page`."""
    grid_inputs = [tab_ui["records_state"], tab_ui["sort_state"]]
    selection_outputs = [tab_ui["selected_state"], tab_ui["action_row"], tab_ui["confirm_row"]]
    refresh_outputs = [
        tab_ui["records_state"], tab_ui["dataframe"], tab_ui["empty_output"], tab_ui["status_output"],
    ] + selection_outputs
    refresh = partial(handlers.refresh_page, page)
    refresh_inputs = [client_dd, tab_ui["sort_state"]]

    tab_ui["tab"].select(refresh, inputs=refresh_inputs, outputs=refresh_outputs)
    tab_ui["refresh_btn"].click(refresh, inputs=refresh_inputs, outputs=refresh_outputs)
    client_dd.change(refresh, inputs=refresh_inputs, outputs=refresh_outputs)

    tab_ui["sort_btn"].click(
        partial(handlers.sort_page, page),
        inputs=[tab_ui["sort_dd"]] + grid_inputs,
        outputs=[tab_ui["sort_state"], tab_ui["dataframe"], tab_ui["empty_output"]] + selection_outputs,
    )

    tab_ui["dataframe"].select(
        partial(handlers.on_select_row, page),
        inputs=grid_inputs,
        outputs=[tab_ui["selected_state"], tab_ui["detail_view"], tab_ui["action_row"]],
    )

    # Edit / New -> JSON editor
    edit_outputs = [tab_ui["edit_column"], tab_ui["edit_id_state"], tab_ui["editor"], tab_ui["edit_title"]]
    tab_ui["edit_btn"].click(
        partial(handlers.start_edit, page), inputs=grid_inputs + [tab_ui["selected_state"]], outputs=edit_outputs
    )
    tab_ui["new_btn"].click(partial(handlers.start_new, page), inputs=[client_dd], outputs=edit_outputs)
    tab_ui["save_btn"].click(
        partial(handlers.save_record, page),
        inputs=[tab_ui["edit_id_state"], tab_ui["editor"]],
        outputs=[tab_ui["edit_status"], tab_ui["edit_column"]],
    ).then(refresh, inputs=refresh_inputs, outputs=refresh_outputs)
    tab_ui["cancel_edit_btn"].click(handlers.cancel_edit, outputs=[tab_ui["edit_column"], tab_ui["edit_id_state"]])

    # Duplicate -> refresh
    tab_ui["duplicate_btn"].click(
        partial(handlers.duplicate_selected, page),
        inputs=grid_inputs + [tab_ui["selected_state"]],
        outputs=tab_ui["edit_status"],
    ).then(refresh, inputs=refresh_inputs, outputs=refresh_outputs)

    # Delete -> confirm -> delete -> refresh
    tab_ui["delete_btn"].click(
        partial(handlers.ask_confirm_delete, page),
        inputs=grid_inputs + [tab_ui["selected_state"]],
        outputs=[tab_ui["pending_delete_state"], tab_ui["confirm_text"], tab_ui["action_row"], tab_ui["confirm_row"]],
    )
    tab_ui["confirm_yes_btn"].click(
        partial(handlers.execute_delete, page),
        inputs=[tab_ui["pending_delete_state"]],
        outputs=[tab_ui["edit_status"], tab_ui["action_row"], tab_ui["confirm_row"]],
    ).then(refresh, inputs=refresh_inputs, outputs=refresh_outputs)
    tab_ui["confirm_no_btn"].click(
        handlers.cancel_delete,
        outputs=[tab_ui["pending_delete_state"], tab_ui["action_row"], tab_ui["confirm_row"]],
    )

    return refresh, refresh_inputs, refresh_outputs


def build_app():
    """Builds the Gradio Blocks for the portal without launching it."""
    notifier = GradioNotifier()
    pages = [page_cls(notifier=notifier) for page_cls in PAGES]

    with gr.Blocks(theme=gr.themes.Soft(primary_hue="blue", secondary_hue="sky"), title="DripDesk") as demo:
        backend_status = gr.Markdown()
        gr.Markdown("# DripDesk marketing portal")
        client_dd = ui.create_client_selector()

        with gr.Tabs():
            tabs = [(page, ui.create_resource_tab(page)) for page in pages]

        demo.load(handlers.check_backend_status, outputs=backend_status)
        demo.load(handlers.load_clients, outputs=client_dd)

        for page, tab_ui in tabs:
            refresh, refresh_inputs, refresh_outputs = wire_resource_tab(page, tab_ui, client_dd)
            # The first tab is visible on load; the others refresh when selected.
            if page is pages[0]:
                demo.load(refresh, inputs=refresh_inputs, outputs=refresh_outputs)

    return demo


def setup_collation():
    """Adopts the host's collation locale for grid string sorting. Returns the active LC_COLLATE."""
    try:
        return locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning(f"Host collation locale unavailable, sorting with the default: {e}")
        return locale.setlocale(locale.LC_COLLATE)


def main():
    os.environ["GRADIO_ANALYTICS_ENABLED"] = "false"
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    setup_collation()

    demo = build_app()
    logger.info(f"DripDesk portal starting on port {config.run_port}, record API at {config.API_BASE_URL}")
    demo.launch(server_name="0.0.0.0", server_port=config.run_port, inbrowser=False)
