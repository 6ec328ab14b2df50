from __future__ import annotations

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
