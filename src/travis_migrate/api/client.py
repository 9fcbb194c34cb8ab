"""HTTP request builder and pagination walker shared by all API clients."""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, List, Optional, Type, TypeVar

import requests
from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from requests.utils import parse_header_links

from .. import __version__
from .exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    PaginationError,
    ResponseParseError,
    TransportError,
)

USER_AGENT = f'travis-migrate/{__version__}'

_LINK_VALUE = re.compile(r'^\s*<[^<>]*>\s*(;.*)?$')

ModelType = TypeVar('ModelType', bound=BaseModel)


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool

    def header(self, name: str) -> Optional[str]:
        """Look up a response header case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class Page(BaseModel):
    """One page of a paginated listing."""

    items: List[Any] = Field(default_factory=list, description='Page content')
    next_url: Optional[str] = Field(
        default=None, description='Target of the following page, if any'
    )


class Pagination(ABC):
    """Capability that tells the walker where the next page lives."""

    @abstractmethod
    def next_target(self, response: APIResponse) -> Optional[str]:
        """Return the next page target, or None when the listing is exhausted."""

    @abstractmethod
    def items(self, response: APIResponse, key: Optional[str] = None) -> List[Any]:
        """Return the content items carried by a page."""


class LinkHeaderPagination(Pagination):
    """Pagination driven by the ``Link`` response header (``rel="next"``)."""

    def next_target(self, response: APIResponse) -> Optional[str]:
        value = response.header('Link')
        if not value:
            return None

        for link in self.parse_links(value):
            if 'next' in link.get('rel', '').split():
                return link['url']
        return None

    def items(self, response: APIResponse, key: Optional[str] = None) -> List[Any]:
        data = response.data
        if key is not None and isinstance(data, dict):
            data = data.get(key)
        if not isinstance(data, list):
            raise ResponseParseError(
                f'Expected a JSON array page, got {type(data).__name__}',
                status_code=response.status_code,
                response_data=response.data,
            )
        return data

    @staticmethod
    def parse_links(value: str) -> List[Dict[str, str]]:
        """Parse a ``Link`` header into its link values.

        Args:
            value: Raw header value

        Returns:
            List of dicts with ``url`` and the link parameters (``rel``, ...)

        Raises:
            PaginationError: If the header is not valid link syntax
        """
        for part in re.split(r',\s*(?=<)', value.strip()):
            if not _LINK_VALUE.match(part):
                raise PaginationError(f'Malformed Link header: {value!r}')

        links = parse_header_links(value)
        if any(not link.get('url') for link in links):
            raise PaginationError(f'Malformed Link header: {value!r}')
        return links


class EnvelopePagination(Pagination):
    """Pagination driven by the ``@pagination`` object embedded in the body."""

    def next_target(self, response: APIResponse) -> Optional[str]:
        envelope = self._body(response).get('@pagination') or {}
        if not isinstance(envelope, dict):
            raise ResponseParseError(
                'Malformed @pagination object',
                status_code=response.status_code,
                response_data=response.data,
            )

        next_link = envelope.get('next')
        if not next_link:
            return None
        if not isinstance(next_link, dict) or not next_link.get('@href'):
            raise ResponseParseError(
                'Malformed @pagination.next link',
                status_code=response.status_code,
                response_data=response.data,
            )
        return next_link['@href']

    def items(self, response: APIResponse, key: Optional[str] = None) -> List[Any]:
        if key is None:
            raise ValueError('Envelope pages need a content key')

        content = self._body(response).get(key)
        if not isinstance(content, list):
            raise ResponseParseError(
                f'Page has no {key!r} list',
                status_code=response.status_code,
                response_data=response.data,
            )
        return content

    @staticmethod
    def _body(response: APIResponse) -> Dict[str, Any]:
        if not isinstance(response.data, dict):
            raise ResponseParseError(
                'Expected a JSON object page',
                status_code=response.status_code,
                response_data=response.data,
            )
        return response.data


class APIClient:
    """Authenticated client bound to one API base URL."""

    def __init__(
        self,
        base_url: str,
        token: str,
        pagination: Pagination,
        timeout: Optional[float] = 30,
        headers: Optional[Dict[str, str]] = None,
    ):
        """Initialize API client.

        Args:
            base_url: Base URL every relative target is resolved against
            token: Token sent in the ``Authorization`` header
            pagination: Next-page extractor for this backend
            timeout: Transport timeout in seconds
            headers: Additional backend-specific headers
        """
        if not token:
            raise AuthenticationError(f'No API token provided for {base_url}')

        self.base_url = base_url.rstrip('/')
        self.pagination = pagination
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                'User-Agent': USER_AGENT,
                'Authorization': f'token {token}',
            }
        )
        if headers:
            self.session.headers.update(headers)

        self.logger = logger.bind(component=self.__class__.__name__)

    def _build_url(self, target: str) -> str:
        """Build full API URL from a path or an absolute URL.

        Args:
            target: API path, or an absolute URL returned by the API

        Returns:
            Full API URL
        """
        if target.startswith(('https://', 'http://')):
            return target
        return f'{self.base_url}/{target.lstrip("/")}'

    def _handle_response(self, response: requests.Response) -> APIResponse:
        """Handle API response and convert to standard format.

        Args:
            response: Raw HTTP response

        Returns:
            Standardized API response

        Raises:
            APIError: For any non-success status
        """
        headers = dict(response.headers)
        status = response.status_code

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = response.text

        if 200 <= status < 300:
            return APIResponse(
                status_code=status, data=data, headers=headers, success=True
            )

        if isinstance(data, dict) and data.get('message'):
            message = data['message']
        elif isinstance(data, dict) and data.get('error_message'):
            message = data['error_message']
        else:
            message = f'HTTP {status}'

        if status == 401:
            error_class = AuthenticationError
        elif status == 404:
            error_class = NotFoundError
        else:
            error_class = APIError

        raise error_class(
            f'API request failed: {message}',
            status_code=status,
            response_data=data,
        )

    def request(
        self,
        method: str,
        target: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Any] = None,
    ) -> APIResponse:
        """Send one request and return the decoded response.

        Args:
            method: HTTP method
            target: API path or absolute URL
            params: Query parameters
            data: JSON request body

        Returns:
            API response

        Raises:
            TransportError: If no response was received
            APIError: If the response status is not a success
        """
        url = self._build_url(target)
        self.logger.debug(f'{method} {url}')

        try:
            response = self.session.request(
                method, url, params=params, json=data, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise TransportError(f'Network error during {method} {url}: {e}') from e

        return self._handle_response(response)

    def get(self, target: str, params: Optional[Dict[str, Any]] = None) -> APIResponse:
        """Make GET request."""
        return self.request('GET', target, params=params)

    def post(self, target: str, data: Optional[Any] = None) -> APIResponse:
        """Make POST request."""
        return self.request('POST', target, data=data)

    def patch(self, target: str, data: Optional[Any] = None) -> APIResponse:
        """Make PATCH request."""
        return self.request('PATCH', target, data=data)

    def iter_pages(
        self,
        method: str,
        target: str,
        key: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Page]:
        """Yield every page of a listing as a ``Page`` envelope.

        Pages come in the order the API returns them. The next page is only
        requested once the previous one has been consumed, and any error
        aborts the walk.

        Args:
            method: HTTP method, re-sent unchanged for every page
            target: API path or absolute URL of the first page
            key: Body field holding the page content, for envelope pages
            params: Query parameters for the first page
        """
        next_target: Optional[str] = target
        while next_target is not None:
            response = self.request(method, next_target, params=params)
            # Continuation targets already carry the query string.
            params = None
            next_target = self.pagination.next_target(response)
            yield Page(items=self.pagination.items(response, key), next_url=next_target)

    def paginate(
        self,
        method: str,
        target: str,
        handler: Callable[[Page], None],
        key: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Walk every page of a listing, handing each one to ``handler``.

        Returns:
            Number of pages visited
        """
        pages = 0
        for page in self.iter_pages(method, target, key=key, params=params):
            handler(page)
            pages += 1
        return pages

    def get_all(
        self,
        target: str,
        key: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        """Get all items of a paginated listing.

        Args:
            target: API path of the listing
            key: Body field holding the page content, for envelope pages
            params: Query parameters for the first page

        Returns:
            List of all items from all pages
        """
        all_items: List[Any] = []

        def collect(page: Page) -> None:
            all_items.extend(page.items)

        pages = self.paginate('GET', target, collect, key=key, params=params)
        self.logger.debug(f'Retrieved {len(all_items)} items in {pages} page(s)')
        return all_items

    @staticmethod
    def parse(model: Type[ModelType], data: Any) -> ModelType:
        """Validate one response object into a model.

        Raises:
            ResponseParseError: If the data does not match the model
        """
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(
                f'Unexpected {model.__name__} payload: {e}', response_data=data
            ) from e

    def close(self):
        """Close the client session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
