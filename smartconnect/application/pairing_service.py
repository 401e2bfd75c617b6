"""
Pairing Service - Binds the register to a SmartConnect device.
"""

from typing import Optional
from urllib.parse import quote

from ..configs import PAIRING_PATH
from ..core.exceptions import SmartConnectError
from ..core.value_objects import PairingRequest, RegisterIdentity
from ..infrastructure.api_client import SmartConnectClient
from ..loggers import logger


class PairingService:
    """
    Application service for pairing.

    One request per call and no retry: the user re-enters the code shown
    on the device if pairing fails.
    """

    def __init__(self, client: SmartConnectClient, register: RegisterIdentity) -> None:
        self._client = client
        self._register = register

    async def pair(self, pairing_code: Optional[str]) -> None:
        """
        Pair the register with the device showing ``pairing_code``.

        The endpoint only answers PUT; any other method returns 404.

        Args:
            pairing_code: Code displayed on the device.

        Raises:
            PairingCodeRequiredError: If the code is empty.
            SmartConnectError: With the server's or transport's message.
        """
        try:
            request = PairingRequest.create(pairing_code, self._register)
            # The code is a single path segment
            url = self._client.url_for(PAIRING_PATH, quote(request.pairing_code, safe=""))
            await self._client.request("PUT", url, request.to_form(), parse_body=False)
        except SmartConnectError as e:
            logger.error(f"Pairing failed: {e.message}")
            raise

        logger.info(f"Register {self._register.register_id} paired")
