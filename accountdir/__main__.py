"""Run the account directory API with uvicorn."""

import uvicorn

from accountdir.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "accountdir.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
