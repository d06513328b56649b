"""Example: connect to the greeting server and print what it says."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tcpsock import LOCALHOST, Endpoint, Role


def main():
    with Endpoint(49110, LOCALHOST, Role.CLIENT) as client:
        client.connect()
        print("Connected to server")
        print(f"Server says: {client.receive().decode()}")


if __name__ == "__main__":
    main()
