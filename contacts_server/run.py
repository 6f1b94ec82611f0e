import argparse

from dotenv import load_dotenv

from contacts_server.api import create_app


def main():
    parser = argparse.ArgumentParser(description="Launch the contacts GraphQL server")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=4000, help="Port to run the server on")
    parser.add_argument("--debug", action="store_true", help="Enable the Flask debugger")
    parser.add_argument("--cert", help="TLS certificate (PEM)")
    parser.add_argument("--key", help="TLS private key (PEM)")
    args = parser.parse_args()

    load_dotenv()

    app = create_app(debug=args.debug)
    ssl_context = (args.cert, args.key) if args.cert and args.key else None
    app.run(host=args.host, port=args.port, debug=args.debug, ssl_context=ssl_context)


if __name__ == "__main__":
    main()
