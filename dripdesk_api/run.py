# dripdesk_api/run.py
import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="DripDesk Record API Launcher")
    parser.add_argument("--port", type=int, default=8421, help="Port to run the record API on (default: 8421)")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    args = parser.parse_args()

    from .main import app
    print(f"DripDesk record API starting on port {args.port} ...")
    print(f"API docs: http://127.0.0.1:{args.port}/docs")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
