"""Run the proxy with uvicorn: ``python -m panoproxy``."""
import uvicorn

from panoproxy.config import settings


def main() -> None:
    uvicorn.run(
        "panoproxy.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    main()
