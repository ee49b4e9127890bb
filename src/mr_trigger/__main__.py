import uvicorn

from mr_trigger.main import app, get_settings


def main():
    settings = get_settings()
    uvicorn.run(app, host=settings.listen_host, port=settings.listen_port)


if __name__ == "__main__":
    main()
