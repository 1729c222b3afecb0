from __future__ import annotations

import os

import uvicorn

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))


def run() -> None:
    uvicorn.run("access_inspector.main:app", host=HOST, port=PORT, log_level="info")


if __name__ == "__main__":
    run()
