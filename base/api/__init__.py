from .client import ApiClient, ApiResponse
from .endpoints import DormitoryAPI

__all__ = ["ApiClient", "ApiResponse", "DormitoryAPI"]
