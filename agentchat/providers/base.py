from abc import ABC, abstractmethod
from typing import Any, Dict


class Provider(ABC):
    """Base interface for an external service the backend depends on"""

    name: str
    timeout_s: float = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is configured to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass
