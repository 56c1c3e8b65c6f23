#services/exceptions.py


class BackendServiceError(Exception):
    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code




class BackendTimeoutError(BackendServiceError):
    pass




class NotFoundError(BackendServiceError):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)




class OfflineError(Exception):
    """Write attempted while the connectivity monitor reports offline."""
    pass




class ValidationFailedError(Exception):
    pass




class TemplateNotFoundError(Exception):
    pass
