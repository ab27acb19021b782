# tests/test_report.py

"""Tests for finding output."""

import contextlib
import csv
import io
import json
import os
import tempfile
import unittest

from scanner import report
from scanner.keys import KeyFinding

PEM = "-----BEGIN PUBLIC KEY-----\nMFwwDQYJ\n-----END PUBLIC KEY-----\n"


def make_finding(**overrides):
    values = {
        "fqdn": "default._domainkey.example.com",
        "raw_txt": '"v=DKIM1; p=MFwwDQYJ"',
        "domain": "example.com",
        "selector": "default",
        "mode": "PROD",
        "key": "MFwwDQYJ",
        "modulus": "12345",
        "exponent": "65537",
        "bits": 512,
        "fingerprint": "a" * 40,
        "pem": PEM,
    }
    values.update(overrides)
    return KeyFinding(**values)


def captured(fn, *args, **kwargs):
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        fn(*args, **kwargs)
    return buf.getvalue()


class TestPrintFinding(unittest.TestCase):

    def test_full_block(self):
        out = captured(report.print_finding, make_finding())
        self.assertIn("# fqdn: default._domainkey.example.com", out)
        self.assertIn('# txt:  "v=DKIM1; p=MFwwDQYJ"', out)
        self.assertIn("# size:  512 bits", out)
        self.assertIn("# n:    12345", out)
        self.assertIn("# e:    65537", out)
        self.assertIn(f"# fp:   {'a' * 40}  512 example.com default PROD", out)
        self.assertIn(PEM, out)

    def test_quiet_prints_only_key(self):
        out = captured(report.print_finding, make_finding(), quiet=True)
        self.assertEqual(out.strip(), PEM.strip())


class TestPrintCandidates(unittest.TestCase):

    def test_one_per_line(self):
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            count = report.print_candidates(iter(["a", "b"]))
        self.assertEqual(count, 2)
        self.assertEqual(buf.getvalue(), "a\nb\n")


class TestFileOutput(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        for name in os.listdir(self.tmpdir):
            os.remove(os.path.join(self.tmpdir, name))
        os.rmdir(self.tmpdir)

    def test_json(self):
        out = captured(report.output_json, [make_finding(), make_finding(selector="s1")])
        data = json.loads(out)
        self.assertEqual([d["selector"] for d in data], ["default", "s1"])
        self.assertEqual(data[0]["bits"], 512)

    def test_csv(self):
        path = os.path.join(self.tmpdir, "out.csv")
        report.write_to_csv([make_finding()], file_name=path)
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["fingerprint"], "a" * 40)

    def test_csv_no_findings(self):
        path = os.path.join(self.tmpdir, "out.csv")
        report.write_to_csv([], file_name=path)
        self.assertFalse(os.path.exists(path))


if __name__ == "__main__":
    unittest.main()
