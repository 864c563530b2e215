"""Tests for ProxyFix middleware configuration."""

import unittest

from flask import jsonify, request

from deskhive import create_app


class TestProxyFix(unittest.TestCase):
    """The app sits behind a TLS-terminating proxy in production."""

    def setUp(self):
        self.app = create_app({"TESTING": True})

        @self.app.route("/whoami")
        def whoami():
            return jsonify(
                {"scheme": request.scheme, "remote_addr": request.remote_addr}
            )

        self.client = self.app.test_client()

    def test_forwarded_headers_are_respected(self):
        response = self.client.get(
            "/whoami",
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-For": "203.0.113.7"},
        )
        self.assertEqual(response.get_json()["scheme"], "https")
        self.assertEqual(response.get_json()["remote_addr"], "203.0.113.7")

    def test_plain_request_stays_http(self):
        response = self.client.get("/whoami")
        self.assertEqual(response.get_json()["scheme"], "http")
