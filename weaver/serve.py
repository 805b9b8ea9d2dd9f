from __future__ import annotations

from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def make_server(output_dir: Path, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> ThreadingHTTPServer:
    handler = partial(SimpleHTTPRequestHandler, directory=str(output_dir))
    return ThreadingHTTPServer((host, port), handler)


def serve(output_dir: Path, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    httpd = make_server(output_dir, host, port)
    print(f"Serving {output_dir} at http://{host}:{httpd.server_address[1]}/")
    print("Press Ctrl+C to stop the server")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print("\nServer stopped.")
    finally:
        httpd.server_close()
