from __future__ import annotations

import uvicorn

from blueprint_api.core.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "blueprint_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_config=None,  # keep the JSON logging installed by blueprint_api.core.logging
    )


if __name__ == "__main__":  # pragma: no cover
    main()
