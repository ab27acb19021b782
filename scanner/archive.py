# scanner/archive.py

import logging

import requests

logger = logging.getLogger("dkimscan.archive")

DEFAULT_API_BASE_URL = "https://archive.prove.email/api"


class SelectorArchive:
    """Look up the selectors the archive knows for a domain."""

    def __init__(self, domain, api_base_url=None, timeout=10):
        self.domain = domain.strip().lower()
        self.api_base_url = api_base_url or DEFAULT_API_BASE_URL
        self.timeout = timeout
        self.error = None

    def fetch(self):
        """Return known selectors in archive order, without duplicates.

        Errors are logged and give an empty list; the scan carries on with
        rule generated candidates only.
        """
        try:
            url = f"{self.api_base_url.rstrip('/')}/key"
            logger.debug("Querying DKIM archive for %s", self.domain)
            response = requests.get(
                url,
                params={"domain": self.domain},
                headers={"accept": "application/json"},
                timeout=self.timeout,
            )
            if response.status_code != 200:
                logger.debug("DKIM archive returned %d for %s", response.status_code, self.domain)
                self.error = f"HTTP {response.status_code}"
                return []
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.debug("DKIM archive request failed for %s: %s", self.domain, e)
            self.error = str(e)
            return []
        except ValueError as e:
            logger.debug("DKIM archive response parse error for %s: %s", self.domain, e)
            self.error = str(e)
            return []

        if not isinstance(data, list):
            return []

        selectors = []
        for record in data:
            if not isinstance(record, dict):
                continue
            selector = record.get("selector")
            if selector and selector not in selectors:
                selectors.append(selector)
        logger.debug("DKIM archive knows %d selectors for %s", len(selectors), self.domain)
        return selectors
