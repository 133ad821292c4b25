"""HTTP client for communicating with the Auditor service."""

import uuid
from typing import Any, List, Optional, Tuple

import httpx

from common.logging_config import get_logger
from common.types import InventoryEntry, SiteSummary
from cli.config import Config
from cli.constants import STRINGS

logger = get_logger(__name__)


class AuditorRequestError(Exception):
    """
    Raised when an Auditor request fails.

    The message is ready to show to the user.
    """
    pass


class AuditorClient:
    """
    Async HTTP client for the Auditor API.

    Requests are sent once; a failed request is reported, never retried.
    """

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize auditor client.

        Args:
            config: Configuration instance
            transport: Optional transport (tests pass httpx.MockTransport)
        """
        self.config = config
        self.session = httpx.AsyncClient(
            base_url=config.get_base_url(),
            timeout=config.get_timeout(),
            transport=transport
        )
        self.request_id = None
        self._nonce: Optional[str] = None
        logger.info(f"Initialized AuditorClient [base_url={config.get_base_url()}]")

    async def close(self) -> None:
        await self.session.aclose()

    async def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Send one HTTP request.

        Raises:
            AuditorRequestError: If the request never got a response
        """
        self.request_id = str(uuid.uuid4())
        headers = kwargs.pop('headers', {})
        headers['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        try:
            response = await self.session.request(method, endpoint, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.error(
                f"Network error: {method} {endpoint} error={type(e).__name__} [request_id={self.request_id}]"
            )
            raise AuditorRequestError(STRINGS["network_error"]) from e

        logger.debug(
            f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
        )
        if response.status_code >= 400:
            logger.warning(
                f"Request failed: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
            )
        return response

    def _format_error(self, response: httpx.Response, fallback: str) -> str:
        """
        Map an HTTP error response to a user-facing message.

        Args:
            response: Error response
            fallback: Message used when the response carries none

        Returns:
            User-friendly error message
        """
        if response.status_code == 403:
            return STRINGS["permission_denied"]

        if self._error_code(response) == 'INVALID_API_KEY':
            return STRINGS["not_logged_in"]

        try:
            error_data = response.json()
        except ValueError:
            return fallback

        if not isinstance(error_data, dict):
            return fallback
        return error_data.get('message') or fallback

    def _error_code(self, response: httpx.Response) -> Optional[str]:
        try:
            error_data = response.json()
        except ValueError:
            return None
        if not isinstance(error_data, dict):
            return None
        return error_data.get('code')

    def _get_auth_header(self) -> dict:
        """
        Get Authorization header with API key.

        Raises:
            AuditorRequestError: If no API key is configured
        """
        api_key = self.config.get_api_key()
        if not api_key:
            raise AuditorRequestError(STRINGS["not_logged_in"])
        return {'Authorization': f'Bearer {api_key}'}

    def _json_body(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"Malformed response body [request_id={self.request_id}]")
            raise AuditorRequestError(STRINGS["invalid_response"]) from e

    async def register(self, username: str, password: str) -> str:
        """
        Register a new user account.

        Args:
            username: Username for new account
            password: Password for new account

        Returns:
            Success or error message
        """
        logger.info(f"Attempting to register user: {username}")
        try:
            response = await self._request(
                'POST',
                '/auth/register',
                json={'username': username, 'password': password}
            )
        except AuditorRequestError as e:
            return f"Registration failed: {e}"

        if response.status_code != 201:
            return f"Registration failed: {self._format_error(response, 'Registration failed')}"

        try:
            data = self._json_body(response)
            api_key = data['api_key']
            user_id = data['user_id']
        except (AuditorRequestError, KeyError, TypeError):
            return f"Registration failed: {STRINGS['invalid_response']}"

        self.config.set_api_key(api_key)
        self._nonce = None
        logger.info(f"Registration successful for user: {username} [user_id={user_id}]")

        lines = ["Registration successful!", f"User ID: {user_id}"]
        if data.get('is_network_admin'):
            lines.append("This account is the network admin.")
        lines.append("API key saved to config.")
        return "\n".join(lines)

    async def login(self, username: str, password: str) -> str:
        """
        Login and store the new API key.

        Args:
            username: Username
            password: Password

        Returns:
            Success or error message
        """
        logger.info(f"Attempting to login user: {username}")
        try:
            response = await self._request(
                'POST',
                '/auth/login',
                json={'username': username, 'password': password}
            )
        except AuditorRequestError as e:
            return f"Login failed: {e}"

        if response.status_code != 200:
            return f"Login failed: {self._format_error(response, 'Login failed')}"

        try:
            api_key = self._json_body(response)['api_key']
        except (AuditorRequestError, KeyError, TypeError):
            return f"Login failed: {STRINGS['invalid_response']}"

        self.config.set_api_key(api_key)
        self._nonce = None
        logger.info(f"Login successful for user: {username}")
        return "Login successful!\nAPI key saved to config."

    async def get_nonce(self) -> str:
        """
        Security token sent with inventory requests.

        Fetched once per API key and reused until the server rejects it.

        Raises:
            AuditorRequestError: If the token cannot be obtained
        """
        if self._nonce is not None:
            return self._nonce

        response = await self._request('GET', '/auth/nonce', headers=self._get_auth_header())
        if response.status_code != 200:
            raise AuditorRequestError(self._format_error(response, STRINGS["invalid_response"]))

        data = self._json_body(response)
        if not isinstance(data, dict) or not data.get('nonce'):
            raise AuditorRequestError(STRINGS["invalid_response"])

        self._nonce = data['nonce']
        return self._nonce

    async def list_sites(self) -> List[SiteSummary]:
        """
        List the sites of the network.

        Raises:
            AuditorRequestError: If the request fails
        """
        response = await self._request('GET', '/inventory/sites', headers=self._get_auth_header())
        if response.status_code != 200:
            raise AuditorRequestError(self._format_error(response, "Error loading sites"))

        data = self._json_body(response)
        try:
            return [
                SiteSummary(
                    site_id=int(site['site_id']),
                    blogname=site['blogname'],
                    domain=site['domain'],
                    path=site['path'],
                )
                for site in data['sites']
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise AuditorRequestError(STRINGS["invalid_response"]) from e

    async def _post_site(self, endpoint: str, site_id: int, fallback: str) -> Any:
        nonce = await self.get_nonce()
        response = await self._request(
            'POST',
            endpoint,
            headers=self._get_auth_header(),
            json={'site_id': site_id, 'nonce': nonce}
        )
        if response.status_code != 200:
            if self._error_code(response) == 'INVALID_NONCE':
                # Expired or stale; the next request asks for a fresh one
                logger.info(f"Discarding rejected nonce [request_id={self.request_id}]")
                self._nonce = None
            raise AuditorRequestError(self._format_error(response, fallback))
        return self._json_body(response)

    async def fetch_inventory(self, site_id: int) -> List[InventoryEntry]:
        """
        Fetch a site's PDF listing.

        Args:
            site_id: Site to list

        Returns:
            Entries in server order (newest upload first)

        Raises:
            AuditorRequestError: With the message to show in place of the table
        """
        logger.info(f"Fetching PDFs [site_id={site_id}]")
        data = await self._post_site('/inventory/pdfs', site_id, STRINGS["error_loading"])

        try:
            return [
                InventoryEntry(
                    id=pdf.get('id'),
                    filename=pdf['filename'],
                    url=pdf['url'],
                    upload_date=pdf['upload_date'],
                    file_size=pdf['file_size'],
                    file_size_raw=pdf.get('file_size_raw', 0),
                )
                for pdf in data['pdfs']
            ]
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Malformed listing response [site_id={site_id}]")
            raise AuditorRequestError(STRINGS["invalid_response"]) from e

    async def export_inventory(self, site_id: int) -> Tuple[str, str]:
        """
        Request a site's CSV export.

        Args:
            site_id: Site to export

        Returns:
            Tuple of (filename, csv_content)

        Raises:
            AuditorRequestError: With the message to show as an alert
        """
        logger.info(f"Requesting CSV export [site_id={site_id}]")
        data = await self._post_site('/inventory/csv', site_id, STRINGS["error_generating"])

        try:
            return data['filename'], data['csv_content']
        except (KeyError, TypeError) as e:
            raise AuditorRequestError(STRINGS["invalid_response"]) from e
