"""Example: TCP echo server serving each client on its own thread."""

import sys
import threading
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tcpsock import LOCALHOST, Connection, Endpoint, Role, TcpSockError


def serve(conn: Connection) -> None:
    """Echo everything a client sends until it disconnects."""
    with conn:
        while True:
            data = conn.receive()
            if not data:
                break
            print(f"Received from {conn.host}:{conn.port}: {data.decode()}")
            conn.send_all(data)
    print(f"Client {conn.host}:{conn.port} disconnected")


def run_server():
    """Run the echo server."""
    with Endpoint(8888, LOCALHOST, Role.SERVER) as server:
        print(f"Server listening on {server.address}")
        try:
            while True:
                conn = server.accept()
                threading.Thread(target=serve, args=(conn,), daemon=True).start()
        except KeyboardInterrupt:
            print("\nShutting down server...")


def run_client():
    """Run the echo client."""
    with Endpoint.create(8888, Role.CLIENT) as client:
        client.connect()
        message = b"Hello, Server!"
        print(f"Sending: {message.decode()}")
        client.send_all(message)
        response = client.receive()
        print(f"Received: {response.decode()}")


if __name__ == "__main__":
    try:
        if len(sys.argv) > 1 and sys.argv[1] == "client":
            run_client()
        else:
            run_server()
    except TcpSockError as e:
        print(f"Error: {e}")
        sys.exit(1)
