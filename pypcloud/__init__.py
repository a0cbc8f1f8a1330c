from .native import PCloudClient, PCloudError, ResultCode

__all__ = ["PCloudClient", "PCloudError", "ResultCode"]
