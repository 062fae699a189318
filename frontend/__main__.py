from __future__ import annotations

import uvicorn

from frontend.core.config import SETTINGS


def main() -> None:
    uvicorn.run(
        "frontend.main:app",
        host="0.0.0.0",
        port=SETTINGS.port,
        log_config=None,  # keep the handlers installed by setup_logging
    )


if __name__ == "__main__":
    main()
