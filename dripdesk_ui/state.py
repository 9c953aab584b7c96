# dripdesk_ui/state.py
# Process-wide portal state shared by the handlers.
# Per-session grid state (records, sort, selection) lives in gr.State instead.

# Formatted choices for the client selector, format: ["Client Name <client-id>"].
CLIENT_CHOICES = []

ALL_CLIENTS = "All clients"
