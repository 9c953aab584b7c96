# dripdesk_ui/config.py
# Central configuration for the portal: command-line arguments and backend endpoints.

import argparse


class AppConfig:
    """
    Parses command-line arguments and constructs the backend endpoint URLs.
    """
    def __init__(self, argv=None):
        parser = argparse.ArgumentParser(description="DripDesk Portal Launcher")
        parser.add_argument(
            "--port",
            type=int,
            default=10101,
            help="Port to run the portal on (default: 10101)"
        )
        parser.add_argument(
            "--bnport",
            type=int,
            default=8421,
            help="Port of the record API (default: 8421)"
        )
        parser.add_argument(
            "--bnserver",
            type=str,
            default="http://127.0.0.1",
            help="Record API address (default: http://127.0.0.1)"
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=10.0,
            help="HTTP timeout in seconds for record API calls (default: 10)"
        )

        # parse_known_args keeps Gradio's reload mode and pytest arguments from breaking startup
        args, _ = parser.parse_known_args(argv)

        self.run_port = args.port
        self.timeout = args.timeout
        backend_base_url = f"{args.bnserver}:{args.bnport}"

        self.ROOT_URL = backend_base_url
        self.API_BASE_URL = f"{backend_base_url}/api"

    def collection_url(self, collection: str) -> str:
        return f"{self.API_BASE_URL}/{collection}"


config = AppConfig()
