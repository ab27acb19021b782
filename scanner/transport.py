# scanner/transport.py

import logging

import dns.asyncquery
import dns.message
import dns.rdatatype

logger = logging.getLogger("dkimscan.transport")

DEFAULT_NAMESERVERS = ["1.1.1.1", "1.0.0.1"]
DEFAULT_TIMEOUT = 5.0
EDNS_PAYLOAD = 1232


class DNSTransport:
    """Sends single TXT queries to a rotating list of recursive resolvers.

    Failures are raised to the caller (``dns.exception.DNSException``,
    ``OSError`` or ``EOFError``); retrying is the scheduler's job.
    """

    def __init__(self, nameservers=None, timeout=DEFAULT_TIMEOUT):
        self.nameservers = list(nameservers or DEFAULT_NAMESERVERS)
        self.timeout = timeout
        self._next = 0

    def _pick_nameserver(self):
        nameserver = self.nameservers[self._next % len(self.nameservers)]
        self._next += 1
        return nameserver

    async def query_txt(self, qname):
        """Return the full response message for a TXT query on ``qname``."""
        query = dns.message.make_query(
            qname, dns.rdatatype.TXT, use_edns=0, payload=EDNS_PAYLOAD
        )
        nameserver = self._pick_nameserver()
        response, used_tcp = await dns.asyncquery.udp_with_fallback(
            query, nameserver, timeout=self.timeout
        )
        if used_tcp:
            logger.debug("%s retried over TCP via %s", qname, nameserver)
        return response
