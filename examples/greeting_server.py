"""Example: accept one client, greet it and exit."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tcpsock import ANY_ADDR, Endpoint, Role, TcpSockError, get_last_error


def main() -> int:
    try:
        with Endpoint(49110, ANY_ADDR, Role.SERVER) as server:
            with server.accept() as client:
                print(f"Client connected: {client.host}:{client.port}")
                server.send("Hello", client)
    except TcpSockError as e:
        print(f"{e.message}: {get_last_error()}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
