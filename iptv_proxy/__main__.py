import uvicorn

from iptv_proxy.config import settings


def main() -> None:
    uvicorn.run("iptv_proxy.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
