"""
Outbound SMS collaborator.
"""
from abc import ABC, abstractmethod

from waitlist.utils.helpers import mask_phone
import structlog

logger = structlog.get_logger()


class SmsSender(ABC):
    """Delivers a text message to a phone number."""
    
    @abstractmethod
    async def send(self, phone: str, message: str) -> None:
        ...


class LoggingSmsSender(SmsSender):
    """
    Default sender: records the dispatch without contacting a provider.
    Swap in a provider-backed sender in deployment.
    """
    
    async def send(self, phone: str, message: str) -> None:
        logger.info("SMS dispatched", phone=mask_phone(phone), length=len(message))
