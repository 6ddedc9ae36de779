# this file is a wrapper to run the server with uvicorn
import uvicorn

from server.core.config.general_config import settings


if __name__ == "__main__":
    uvicorn.run("server.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
