import uvicorn

from movieroom.config import HOST, LOG_LEVEL, PORT

if __name__ == "__main__":
    uvicorn.run("movieroom.main:socket_app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
