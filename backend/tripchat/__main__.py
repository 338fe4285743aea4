import uvicorn

from tripchat.config import settings

if __name__ == "__main__":
    uvicorn.run("tripchat.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
