class RoomError(Exception):
    """Base class for failures reported back to a single session.

    ``event`` names the socket event the failure is delivered on and
    ``status_code`` is used when the same failure surfaces over HTTP.
    """

    event = "roomError"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def payload(self) -> dict:
        return {"message": self.message}


class RoomNotFound(RoomError):
    status_code = 404

    def __init__(self, message: str = "Room not found"):
        super().__init__(message)


class InvalidPassword(RoomError):
    status_code = 403

    def __init__(self, message: str = "Incorrect password"):
        super().__init__(message)


class NotInRoom(RoomError):
    status_code = 409

    def __init__(self, message: str = "You are not in this room"):
        super().__init__(message)


class AuthorityViolation(RoomError):
    event = "syncError"
    status_code = 403

    def __init__(self, message: str = "Only the host can control playback"):
        super().__init__(message)


class ValidationError(RoomError):
    def __init__(self, message: str, event: str = "roomError"):
        super().__init__(message)
        self.event = event
