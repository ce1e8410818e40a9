"""Helper to launch the proxy under uvicorn from Python."""
from __future__ import annotations
import os
import subprocess

def main() -> None:
    host = os.getenv("PROXY_HOST", "0.0.0.0")
    port = os.getenv("PROXY_PORT", "8000")

    cmd = [
        "python",
        "-m",
        "uvicorn",
        "classroom_proxy.serve.fastapi_app:app",
        "--host", host,
        "--port", str(port),
    ]
    subprocess.run(cmd, check=True)

if __name__ == "__main__":
    main()
