# scanner/dkim.py

import logging
import re

import dns.rcode
import dns.rdatatype

logger = logging.getLogger("dkimscan.dkim")

SELECTOR_MARKER = "._domainkey."

MODE_TEST = "TEST"
MODE_PROD = "PROD"

_SPLIT_STRING_RE = re.compile(r'"\s+"')
_TAG_RE = re.compile(r"\s*([^=\s][^=]*)=([^;]*)(?:;\s*|\Z)")
_WHITESPACE_RE = re.compile(r"\s+")


def base64pad(value):
    """Pad base64 text with '=' up to a multiple of four characters."""
    return value + "=" * (-len(value) % 4)


def parse_dkim_txt(txt):
    """Parse a DKIM TXT value into a dict of tags.

    Leading ``tag=value`` pairs are consumed until the text stops looking like
    one; whatever follows is ignored. A present ``p`` tag is returned with its
    whitespace removed and base64 padding restored.
    """
    txt = _SPLIT_STRING_RE.sub(" ", txt)

    tags = {}
    while True:
        match = _TAG_RE.match(txt)
        if not match:
            break
        value = match.group(2)
        # an escaped separator leaves its backslash on the value
        if value.endswith("\\"):
            value = value[:-1]
        tags[match.group(1).strip()] = value.strip()
        txt = txt[match.end():]

    if tags.get("p"):
        tags["p"] = base64pad(_WHITESPACE_RE.sub("", tags["p"]))
    return tags


def dkim_mode(tags):
    """TEST when the record carries the t=y testing flag, PROD otherwise."""
    if tags.get("t", "").lower() == "y":
        return MODE_TEST
    return MODE_PROD


def split_qname(qname):
    """Split ``<selector>._domainkey.<domain>`` on the first marker.

    Returns ``(selector, domain)`` or ``None`` when the marker is missing.
    """
    selector, marker, domain = qname.partition(SELECTOR_MARKER)
    if not marker:
        return None
    return selector, domain


def txt_value(rdata):
    """Join the character strings of a TXT rdata into one string."""
    return b"".join(rdata.strings).decode("utf-8", errors="replace")


class ScanSession:
    """Response handling state for one scan.

    Holds the set of selectors already answered, so each selector is reported
    at most once per session no matter how many rules generated it.
    """

    def __init__(self, inspector, emit=None):
        self.inspector = inspector
        self.emit = emit
        self.found = set()
        self.findings = []

    def handle_response(self, response):
        """Process one DNS response; ``None`` means the lookup gave up."""
        if response is None:
            return
        if response.rcode() == dns.rcode.NXDOMAIN:
            return

        if not response.question:
            logger.warning("Response without a question section, skipping")
            return
        qname = response.question[0].name.to_text(omit_final_dot=True)

        parts = split_qname(qname)
        if parts is None:
            logger.warning("Unexpected question name %s, skipping", qname)
            return
        selector, domain = parts

        if selector in self.found:
            return
        self.found.add(selector)

        for rrset in response.answer:
            if rrset.rdtype != dns.rdatatype.TXT:
                continue
            for rdata in rrset:
                finding = self._inspect_record(qname, rdata, domain, selector)
                if finding is not None:
                    self.findings.append(finding)
                    if self.emit is not None:
                        self.emit(finding)
                    return

    def _inspect_record(self, qname, rdata, domain, selector):
        tags = parse_dkim_txt(txt_value(rdata))
        if not tags.get("p"):
            logger.debug("%s has no usable public key (revoked or not DKIM)", qname)
            return None
        return self.inspector.inspect(
            fqdn=qname,
            raw_txt=rdata.to_text(),
            domain=domain,
            selector=selector,
            mode=dkim_mode(tags),
            key=tags["p"],
        )
