"""HTTP/1.1 request parsing and response serialization over sockets."""

import logging
import socket
import urllib.parse
from typing import Optional, Tuple

from httpserve.bootstrap.config import HEADER_DELIMITER, MAX_BODY_BYTES, MAX_HEADER_BYTES
from httpserve.domain.correlation_id import (
    get_correlation_id,
    get_logger,
    set_correlation_id,
)
from httpserve.domain.http_types import HttpRequest, HttpResponse
from httpserve.pipeline.validation import RequestEntityTooLarge

IO_LOGGER = get_logger("io")

RECV_SIZE = 4096


def parse_headers(lines: list[str]) -> dict[str, str]:
    """Convert raw header lines into a lowercase-keyed dictionary."""
    parsed = {}
    for line in lines:
        name, separator, value = line.partition(":")
        if not separator or not name.strip():
            continue
        parsed[name.strip().lower()] = value.strip()
    return parsed


def parse_request_line(request_line: str) -> Tuple[str, str, str, str]:
    """Split a request line into method, raw target, encoded path and version."""
    parts = request_line.split(" ")
    if len(parts) != 3 or not all(parts):
        raise ValueError("Invalid request line")
    method, target, version = parts
    if not version.startswith("HTTP/1."):
        raise ValueError(f"Unsupported protocol version {version}")

    if target.startswith("/"):
        path = target.split("?", 1)[0].split("#", 1)[0]
    elif "://" in target:
        path = urllib.parse.urlsplit(target).path or "/"
    else:
        # asterisk-form and authority-form never name a cached file
        path = target
    return method, target, path, version


def determine_content_length(headers: dict[str, str]) -> int:
    """Validate and return the declared Content-Length for the request."""
    if "transfer-encoding" in headers:
        raise ValueError("Request bodies with Transfer-Encoding are not supported")
    header_value = headers.get("content-length")
    if header_value is None:
        return 0
    try:
        content_length = int(header_value)
    except ValueError as exc:
        raise ValueError("Invalid Content-Length") from exc
    if content_length < 0:
        raise ValueError("Negative Content-Length")
    if content_length > MAX_BODY_BYTES:
        raise RequestEntityTooLarge
    return content_length


def receive_request(
    client_socket: socket.socket, buffer: bytes
) -> Tuple[Optional[HttpRequest], bytes]:
    """Read bytes from the socket until a complete request is available.

    Returns ``(None, b"")`` when the peer closes the connection first.
    """
    while HEADER_DELIMITER not in buffer:
        if len(buffer) > MAX_HEADER_BYTES:
            raise ValueError("Request header block too large")
        chunk = client_socket.recv(RECV_SIZE)
        if not chunk:
            return None, b""
        buffer += chunk

    header_block, remainder = buffer.split(HEADER_DELIMITER, 1)
    header_lines = header_block.decode("iso-8859-1").split("\r\n")
    method, target, path, version = parse_request_line(header_lines[0])
    headers = parse_headers(header_lines[1:])

    incoming_correlation_id = headers.get("x-request-id")
    if incoming_correlation_id:
        set_correlation_id(incoming_correlation_id)

    content_length = determine_content_length(headers)
    while len(remainder) < content_length:
        chunk = client_socket.recv(RECV_SIZE)
        if not chunk:
            return None, b""
        remainder += chunk

    body = remainder[:content_length]
    leftover = remainder[content_length:]
    if IO_LOGGER.logger.isEnabledFor(logging.DEBUG):
        IO_LOGGER.debug(
            "Parsed request",
            extra={"event": "request_parsed", "method": method, "path": path},
        )
    return HttpRequest(method, target, path, headers, body, version), leftover


def render_head(response: HttpResponse) -> bytes:
    """Render the status line and headers, including the blank line."""
    headers = dict(response.headers)
    correlation_id = get_correlation_id()
    if correlation_id:
        headers["X-Request-ID"] = correlation_id
    headers["Content-Length"] = str(response.content_length)
    if response.close_connection:
        headers["Connection"] = "close"

    header_lines = [response.status_line]
    header_lines.extend(f"{name}: {value}" for name, value in headers.items())
    return "\r\n".join(header_lines).encode("iso-8859-1") + HEADER_DELIMITER


def serialize_response(response: HttpResponse) -> bytes:
    """Render the full response as it goes on the wire."""
    head = render_head(response)
    if response.omit_body:
        return head
    return head + response.body


def send_response(client_socket: socket.socket, response: HttpResponse) -> None:
    """Serialize and send the HTTP response over the socket."""
    client_socket.sendall(serialize_response(response))
    if IO_LOGGER.logger.isEnabledFor(logging.DEBUG):
        IO_LOGGER.debug(
            "Sent response",
            extra={
                "event": "response_sent",
                "status_code": response.status_code,
                "bytes_out": 0 if response.omit_body else response.content_length,
            },
        )
