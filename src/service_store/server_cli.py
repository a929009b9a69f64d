"""CLI entry point for the service store server."""

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="service-store",
        description="Environment and build lifecycle store",
    )
    parser.add_argument("--host", default=None, help="Bind host (default: from settings)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: from settings)")
    parser.add_argument(
        "--local",
        action="store_true",
        help="Local dev mode: SQLite database, console logs",
    )
    args = parser.parse_args(argv)

    # Must be set before service_store.config is first imported
    if args.local:
        os.environ["SERVICE_STORE_LOCAL_MODE"] = "1"

    import uvicorn

    from service_store.config import settings

    uvicorn.run(
        "service_store.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


if __name__ == "__main__":
    main()
