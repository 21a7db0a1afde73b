"""
Shared test helpers

StubEmailServer is a minimal HTTP/1.1 responder on a real localhost socket.
It records each request it receives and answers with a fixed status after an
optional delay, which lets tests exercise genuine network timeouts.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Dict[str, str]
    body: bytes


@dataclass
class StubEmailServer:
    status: int = 200
    delay: float = 0.0
    requests: List[RecordedRequest] = field(default_factory=list)
    _server: Optional[asyncio.AbstractServer] = None
    _handlers: set = field(default_factory=set)

    @property
    def uri(self) -> str:
        host, port = self._server.sockets[0].getsockname()[:2]
        return f"http://{host}:{port}"

    async def __aenter__(self) -> "StubEmailServer":
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self._server.close()
        for task in list(self._handlers):
            task.cancel()
        await asyncio.gather(*self._handlers, return_exceptions=True)

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        self._handlers.add(task)
        try:
            head = await reader.readuntil(b"\r\n\r\n")
            request_line, *header_lines = head.decode("latin-1").split("\r\n")
            method, path, _ = request_line.split(" ", 2)

            headers = {}
            for line in header_lines:
                if line:
                    name, value = line.split(":", 1)
                    headers[name.strip().lower()] = value.strip()

            body = await reader.readexactly(int(headers.get("content-length", "0")))
            self.requests.append(RecordedRequest(method, path, headers, body))

            if self.delay:
                await asyncio.sleep(self.delay)

            writer.write(
                f"HTTP/1.1 {self.status} Stub\r\nContent-Length: 0\r\nConnection: close\r\n\r\n".encode()
            )
            await writer.drain()
        except (asyncio.IncompleteReadError, ConnectionError):
            pass
        finally:
            writer.close()
            self._handlers.discard(task)
