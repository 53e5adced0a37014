"""Request and response value types shared by the pipeline and transport."""

from dataclasses import dataclass


@dataclass
class HttpRequest:
    """A parsed HTTP/1.x request.

    ``target`` is the raw request target (path plus query, or an absolute
    URI). ``path`` is its path component, still percent-encoded.
    """

    method: str
    target: str
    path: str
    headers: dict[str, str]
    body: bytes = b""
    version: str = "HTTP/1.1"


@dataclass
class HttpResponse:
    """A response ready to be serialized onto a socket."""

    status_line: str
    headers: dict[str, str]
    body: bytes
    close_connection: bool
    omit_body: bool = False

    @property
    def content_length(self) -> int:
        return len(self.body)

    @property
    def status_code(self) -> int:
        return int(self.status_line.split(" ", 2)[1])


def should_close(headers: dict[str, str], version: str = "HTTP/1.1") -> bool:
    """Determine whether the connection should be closed after responding.

    HTTP/1.0 connections close unless the client asked for keep-alive.
    """
    options = {
        token.strip().lower() for token in headers.get("connection", "").split(",")
    }
    if "close" in options:
        return True
    return version == "HTTP/1.0" and "keep-alive" not in options
