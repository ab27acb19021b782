# scanner/scheduler.py

"""Bounded-concurrency TXT lookups with per-query retries."""

import asyncio
import logging
from dataclasses import dataclass

import dns.exception
import dns.name

logger = logging.getLogger("dkimscan.scheduler")

DEFAULT_MAX_IN_FLIGHT = 2048
DEFAULT_RETRIES = 3
DKIM_LABEL = "_domainkey"

TRANSPORT_ERRORS = (dns.exception.DNSException, OSError, EOFError)


@dataclass
class ScanRequest:
    selector: str
    domain: str
    attempts_remaining: int

    @property
    def qname(self):
        return f"{self.selector}.{DKIM_LABEL}.{self.domain}"


class ScanScheduler:
    """Dispatch TXT queries with a fixed in-flight cap and per-query retries."""

    def __init__(self, transport, handler, max_in_flight=DEFAULT_MAX_IN_FLIGHT,
                 retries=DEFAULT_RETRIES):
        if max_in_flight < 1:
            raise ValueError("max_in_flight must be at least 1")
        self.transport = transport
        self.handler = handler
        self.max_in_flight = max_in_flight
        self.retries = max(0, retries)
        self._slots = asyncio.Semaphore(max_in_flight)
        self._tasks = set()
        self.submitted = 0
        self.completed = 0
        self.failed = 0

    @property
    def in_flight(self):
        return len(self._tasks)

    async def submit(self, selector, domain):
        """Queue a lookup for one selector, waiting for a free slot first."""
        await self._slots.acquire()
        request = ScanRequest(selector, domain, self.retries + 1)
        task = asyncio.create_task(self._resolve(request))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        self.submitted += 1

    def _task_done(self, task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Response handling failed: %s", exc, exc_info=exc)

    async def _resolve(self, request):
        try:
            response = None
            try:
                dns.name.from_text(request.qname)
            except dns.exception.DNSException as e:
                # malformed names never reach the transport
                logger.debug("Skipping %r: %s", request.qname, e)
                request.attempts_remaining = 0
            while request.attempts_remaining > 0:
                request.attempts_remaining -= 1
                try:
                    response = await self.transport.query_txt(request.qname)
                    break
                except TRANSPORT_ERRORS as e:
                    logger.debug("Query %s failed (%d attempts left): %s",
                                 request.qname, request.attempts_remaining, e)

            if response is None:
                self.failed += 1
            else:
                self.completed += 1
            self.handler(response)
        finally:
            self._slots.release()

    async def drain(self):
        """Wait until every submitted query has been answered or given up."""
        while self._tasks:
            await asyncio.wait(list(self._tasks))

    async def run(self, candidates, domain):
        """Scan every candidate selector for ``domain`` and wait for the results."""
        for selector in candidates:
            await self.submit(selector, domain)
        logger.debug("All %d candidates submitted for %s, draining %d in flight",
                     self.submitted, domain, self.in_flight)
        await self.drain()
        logger.info("Scan of %s finished: %d queried, %d answered, %d gave up",
                    domain, self.submitted, self.completed, self.failed)
