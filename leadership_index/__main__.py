import uvicorn

from leadership_index.config import settings


def main() -> None:
    uvicorn.run(
        "leadership_index.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
