# scanner/keys.py

import base64
import binascii
import hashlib
import logging
from dataclasses import asdict, dataclass

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger("dkimscan.keys")

PEM_LINE_WIDTH = 64
SPKI_LABEL = "PUBLIC KEY"
PKCS1_LABEL = "RSA PUBLIC KEY"


@dataclass(frozen=True)
class KeyFinding:
    """One selector publishing a usable RSA key."""

    fqdn: str
    raw_txt: str
    domain: str
    selector: str
    mode: str
    key: str
    modulus: str
    exponent: str
    bits: int
    fingerprint: str
    pem: str

    @property
    def summary(self):
        return f"{self.fingerprint} {self.bits:4d} {self.domain} {self.selector} {self.mode}"

    def to_dict(self):
        return asdict(self)


def raw_to_pem(b64, label=SPKI_LABEL):
    """Frame base64 text as a PEM block with 64 character lines."""
    lines = [b64[i:i + PEM_LINE_WIDTH] for i in range(0, len(b64), PEM_LINE_WIDTH)]
    return "\n".join([f"-----BEGIN {label}-----", *lines, f"-----END {label}-----"]) + "\n"


def fingerprint(raw):
    """SHA-1 hex digest of the decoded key bytes."""
    return hashlib.sha1(raw).hexdigest()


class KeyInspector:
    """Loads the key from a DKIM ``p`` tag and derives its parameters."""

    def load_public_key(self, raw):
        """Load DER key bytes as SubjectPublicKeyInfo, falling back to PKCS#1."""
        b64 = base64.b64encode(raw).decode("ascii")
        try:
            return serialization.load_pem_public_key(raw_to_pem(b64).encode("ascii"))
        except ValueError:
            # some records publish the bare RSAPublicKey structure
            return serialization.load_pem_public_key(
                raw_to_pem(b64, PKCS1_LABEL).encode("ascii")
            )

    def inspect(self, fqdn, raw_txt, domain, selector, mode, key):
        """Return a KeyFinding, or None when the key is not a loadable RSA key."""
        try:
            raw = base64.b64decode(key)
        except (binascii.Error, ValueError) as e:
            logger.debug("Could not decode public key for %s: %s", fqdn, e)
            return None

        try:
            public_key = self.load_public_key(raw)
        except (ValueError, UnsupportedAlgorithm) as e:
            logger.debug("Could not load public key for %s: %s", fqdn, e)
            return None

        if not isinstance(public_key, rsa.RSAPublicKey):
            logger.debug("Public key for %s is not RSA (%s), skipping",
                         fqdn, type(public_key).__name__)
            return None

        numbers = public_key.public_numbers()
        pem = public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")

        return KeyFinding(
            fqdn=fqdn,
            raw_txt=raw_txt,
            domain=domain,
            selector=selector,
            mode=mode,
            key=key,
            modulus=str(numbers.n),
            exponent=str(numbers.e),
            # modulus length in whole bytes
            bits=(public_key.key_size + 7) // 8 * 8,
            fingerprint=fingerprint(raw),
            pem=pem,
        )
