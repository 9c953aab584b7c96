# dripdesk_ui/run.py
# Entry point for the portal (installed as the `dripdesk-ui` console script).

def main():
    """Builds and launches the Gradio portal."""
    print("Initializing DripDesk portal...")

    from .main import main as run_portal
    run_portal()


if __name__ == "__main__":
    main()
