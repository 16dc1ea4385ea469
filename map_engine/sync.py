"""
Sync client.

Sends one commit request per drop to the remote store and turns every
non-success outcome into a NetworkError. A commit that comes back after
the hard upper bound counts as timed out even if the store accepted it.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from map_engine.errors import CommitTimeoutError, NetworkError
from map_engine.timing import Clock, monotonic_ms

logger = logging.getLogger(__name__)

COMMIT_PATH = '/api/grid-move'
DEFAULT_COMMIT_TIMEOUT_S = 10.0
READ_CHUNK_SIZE = 1024


@dataclass(frozen=True)
class CommitRequest:
    """Position change sent to the remote store; swaps carry swap_with_id."""

    entity_id: str
    grid_row: int
    grid_col: int
    zone: str
    swap_with_id: Optional[str] = None

    @property
    def is_swap(self) -> bool:
        return self.swap_with_id is not None

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            'entityId': self.entity_id,
            'grid_row': self.grid_row,
            'grid_col': self.grid_col,
            'zone': self.zone,
        }
        if self.swap_with_id is not None:
            payload['swap_with_id'] = self.swap_with_id
        return payload


@dataclass(frozen=True)
class CommitResponse:
    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def reason(self) -> Optional[str]:
        if isinstance(self.body, dict):
            return self.body.get('reason')
        return None

    @property
    def error_message(self) -> str:
        if isinstance(self.body, dict) and self.body.get('error'):
            return str(self.body['error'])
        if isinstance(self.body, str) and self.body:
            return self.body
        return f'HTTP {self.status}'


class HttpTransport:
    """
    POSTs commit payloads as JSON with requests.

    requests applies its timeout to the connect and to each socket read,
    not to the whole exchange, so the body is streamed and the transport
    gives up once the overall deadline has passed. A single stalled read
    can still overrun the deadline by at most one read timeout.

    Args:
        base_url: Remote store root, e.g. http://localhost:5000
        session: Optional requests.Session to reuse connections
        path: Commit endpoint path
        clock: Millisecond clock used for the overall deadline
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 path: str = COMMIT_PATH, clock: Optional[Clock] = None):
        self.url = base_url.rstrip('/') + path
        self.session = session or requests.Session()
        self.clock = clock or monotonic_ms

    def send(self, payload: Dict[str, Any], timeout: float) -> CommitResponse:
        deadline = self.clock() + timeout * 1000
        try:
            response = self.session.post(self.url, json=payload,
                                         timeout=(timeout, timeout), stream=True)
            with response:
                content = self._read_body(response, deadline, timeout)
        except requests.Timeout as e:
            raise CommitTimeoutError(f'No response from {self.url} within {timeout}s') from e
        except requests.RequestException as e:
            raise NetworkError(f'Request to {self.url} failed: {e}') from e

        try:
            body = json.loads(content)
        except ValueError:
            body = content.decode(response.encoding or 'utf-8', errors='replace')
        return CommitResponse(response.status_code, body)

    def _read_body(self, response: requests.Response, deadline: float,
                   timeout: float) -> bytes:
        chunks = []
        for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
            if self.clock() > deadline:
                raise CommitTimeoutError(
                    f'Response from {self.url} still arriving after {timeout}s'
                )
            chunks.append(chunk)
        return b''.join(chunks)


class SyncClient:
    """
    Commits position changes through a transport.

    Args:
        transport: Object with send(payload, timeout) -> CommitResponse
        timeout_s: Hard upper bound for one commit
        clock: Millisecond clock used to enforce the bound
    """

    def __init__(self, transport, timeout_s: float = DEFAULT_COMMIT_TIMEOUT_S,
                 clock: Optional[Clock] = None):
        self.transport = transport
        self.timeout_s = timeout_s
        self.clock = clock or monotonic_ms

    def commit(self, request: CommitRequest) -> CommitResponse:
        """
        Send a commit and validate the outcome.

        Returns:
            The successful response

        Raises:
            CommitTimeoutError: transport timeout, or a response arriving
                after timeout_s
            NetworkError: transport failure or non-success status
        """
        payload = request.to_payload()
        kind = 'swap' if request.is_swap else 'move'
        logger.debug(f'[ZoneMap] committing {kind}: {payload}')

        started = self.clock()
        response = self.transport.send(payload, self.timeout_s)
        elapsed_ms = self.clock() - started

        if elapsed_ms > self.timeout_s * 1000:
            logger.warning(
                f'[ZoneMap] {kind} of {request.entity_id} answered after '
                f'{elapsed_ms:.0f} ms, treating as timed out'
            )
            raise CommitTimeoutError(f'Commit took {elapsed_ms:.0f} ms')

        if not response.ok:
            logger.error(
                f'[ZoneMap] {kind} of {request.entity_id} rejected: '
                f'status={response.status} reason={response.reason}'
            )
            raise NetworkError(response.error_message, status=response.status,
                               reason=response.reason)

        return response
